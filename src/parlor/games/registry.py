"""Strategy map: one rule kernel per game type"""

from typing import Optional

from parlor.chess.game import ChessKernel
from parlor.core.shared_types import GameType
from parlor.games.hangman import HangmanKernel
from parlor.games.kernel import RuleKernel
from parlor.games.memory import MemoryKernel
from parlor.games.rps import RPSKernel
from parlor.games.tictactoe import TicTacToeKernel
from parlor.games.wordle import WordleKernel
from parlor.games.words import WordDictionary

KernelRegistry = dict[GameType, RuleKernel]


def default_kernels(dictionary: Optional[WordDictionary] = None) -> KernelRegistry:
    """The word games share one dictionary, so a seeded dictionary makes the whole registry deterministic."""
    dictionary = dictionary or WordDictionary()
    kernels: list[RuleKernel] = [
        TicTacToeKernel(),
        RPSKernel(),
        WordleKernel(dictionary=dictionary),
        HangmanKernel(dictionary=dictionary),
        ChessKernel(),
        MemoryKernel(),
    ]
    return {kernel.game_type: kernel for kernel in kernels}
