"""Tabular Q-Learning - a model-free reinforcement learning agent.

This package implements a Q-Learning agent that learns action values for a
discrete MDP purely from interaction with an environment, using a lazily
populated Q-table and an epsilon-greedy behavior policy.
"""

from .domain.errors import ActionNotFound, InvalidConfiguration, QLearningError
from .domain.environment import SimulatedEnvironment, TerminalStates, UniformCostReward
from .domain.hashing import HashableStateCanonicalizer, SimpleStateCanonicalizer
from .domain.initialization import ConstantValueInitialization, FunctionValueInitialization
from .domain.policy import EpsilonGreedyPolicy, GreedyPolicy
from .domain.qlearning import QLearningAgent
from .domain.qtable import ActionValueTable
from .domain.types import (
    EnvironmentOutcome, EpisodeRecord, QEntry, QLearningConfig, TrainingResult, Transition
)

__version__ = "1.0.0"
__author__ = "Tabular Q-Learning"
