"""Q-Learning algorithm implementation."""

import dataclasses
import time
from typing import List, Optional

from .errors import InvalidConfiguration
from .policy import EpsilonGreedyPolicy, GreedyPolicy
from .qtable import ActionValueTable
from .types import (
    Action, ActionEnumerator, Environment, EpisodeRecord, QEntry, QLearningConfig,
    State, StateCanonicalizer, TieBreak, TrainingResult, ValueInitialization
)
from ..utils.rng import SeededRNG

# max_steps value meaning "run until the environment terminates"
UNBOUNDED = -1


class QLearningAgent:
    """Tabular Q-learning agent with an epsilon-greedy behavior policy.

    The agent owns its action-value table exclusively. Each call to
    run_episode() drives one episode against an environment and applies the
    one-step Q-learning update after every transition:

        Q(s,a) <- Q(s,a) + alpha * (r + gamma * max_a' Q(s',a') - Q(s,a))

    where the bootstrap term is dropped when s' is terminal.
    """

    def __init__(self, domain: ActionEnumerator, gamma: float, canonicalizer: StateCanonicalizer,
                 q_init: ValueInitialization, learning_rate: float, epsilon: float,
                 tie_break: TieBreak = "random", seed: Optional[int] = None):
        self._config = QLearningConfig(
            discount_factor=gamma,
            learning_rate=learning_rate,
            epsilon=epsilon,
            tie_break=tie_break,
            seed=seed
        )
        self.domain = domain
        self.rng = SeededRNG(seed)
        self._table = ActionValueTable(domain, canonicalizer, q_init)
        self.learning_policy = self._build_policy()

    @classmethod
    def from_config(cls, domain: ActionEnumerator, config: QLearningConfig,
                    canonicalizer: StateCanonicalizer, q_init: ValueInitialization) -> "QLearningAgent":
        """Create an agent from a configuration object."""
        return cls(
            domain,
            gamma=config.discount_factor,
            canonicalizer=canonicalizer,
            q_init=q_init,
            learning_rate=config.learning_rate,
            epsilon=config.epsilon,
            tie_break=config.tie_break,
            seed=config.seed
        )

    def _build_policy(self) -> EpsilonGreedyPolicy:
        return EpsilonGreedyPolicy(self, self._config.epsilon, rng=self.rng,
                                   tie_break=self._config.tie_break)

    @property
    def config(self) -> QLearningConfig:
        return self._config

    @property
    def table(self) -> ActionValueTable:
        return self._table

    @property
    def gamma(self) -> float:
        return self._config.discount_factor

    @property
    def learning_rate(self) -> float:
        return self._config.learning_rate

    @property
    def epsilon(self) -> float:
        return self._config.epsilon

    def reconfigure(self, **changes) -> QLearningConfig:
        """Replace configuration fields; learned values are kept.

        Raises InvalidConfiguration for out-of-range values and TypeError
        for unknown field names.
        """
        new_config = dataclasses.replace(self._config, **changes)
        if new_config.seed != self._config.seed:
            self.rng.reseed(new_config.seed)
        self._config = new_config
        self.learning_policy = self._build_policy()
        return new_config

    # Q-function

    def q_values(self, state: State) -> List[QEntry]:
        """Get all Q-value entries of a state, initializing them on first visit."""
        return self._table.get_entries(state)

    def q_value(self, state: State, action: Action) -> float:
        """Get the Q-value of a state-action pair."""
        return self._table.get_entry(state, action).value

    def value(self, state: State) -> float:
        """Greedy value of a state: the maximum of its Q-values."""
        return self._table.value(state)

    def greedy_policy(self) -> GreedyPolicy:
        """Policy that follows the learned values without exploring."""
        return GreedyPolicy(self, rng=self.rng, tie_break=self._config.tie_break)

    def reset_solver(self):
        """Forget everything learned; configuration is unchanged."""
        self._table.reset()

    # Learning

    def run_episode(self, env: Environment, max_steps: Optional[int] = None) -> EpisodeRecord:
        """Run one learning episode until a terminal state or max_steps.

        max_steps of None or -1 means the episode is unbounded. Exceptions
        raised by the environment propagate unchanged.
        """
        if max_steps is None:
            max_steps = UNBOUNDED
        if max_steps < 0 and max_steps != UNBOUNDED:
            raise InvalidConfiguration(f"max_steps must be non-negative or {UNBOUNDED}, got {max_steps}")

        current_state = env.current_observation()
        episode = EpisodeRecord(initial_state=current_state)

        steps = 0
        while not env.is_in_terminal_state() and (max_steps == UNBOUNDED or steps < max_steps):
            action = self.learning_policy.select_action(current_state)

            next_state, reward, terminated = env.execute_action(action)
            episode.record_transition(action, next_state, reward, terminated)

            # Read the bootstrap value before touching the current entry
            if terminated:
                target = reward
            else:
                target = reward + self.gamma * self.value(next_state)

            self._table.update(current_state, action, target, self.learning_rate)

            current_state = next_state
            steps += 1

        return episode

    def train(self, env: Environment, episodes: int, max_steps: Optional[int] = None,
              log_interval: int = 0) -> TrainingResult:
        """Run several learning episodes, resetting the environment after each."""
        if episodes < 0:
            raise InvalidConfiguration(f"episodes must be non-negative, got {episodes}")

        episodes_list: List[EpisodeRecord] = []
        terminated_episodes = 0
        start_time = time.time()

        if log_interval > 0:
            print(f"Starting training for {episodes} episodes...")

        for episode_num in range(episodes):
            episode = self.run_episode(env, max_steps)
            env.reset_environment()

            episodes_list.append(episode)
            if episode.terminated:
                terminated_episodes += 1

            # Print progress occasionally
            if log_interval > 0 and (episode_num + 1) % log_interval == 0:
                recent = episodes_list[-log_interval:]
                recent_terminated = sum(1 for ep in recent if ep.terminated)
                recent_steps = sum(len(ep) for ep in recent) / len(recent)
                print(f"Episode {episode_num + 1}: Termination rate: {recent_terminated / len(recent):.1%}, "
                      f"Average steps: {recent_steps:.1f}, States visited: {len(self._table)}")

        total_reward = sum(ep.total_reward for ep in episodes_list)
        total_steps = sum(len(ep) for ep in episodes_list)
        count = len(episodes_list)

        if log_interval > 0:
            print(f"Training finished in {time.time() - start_time:.2f}s")

        return TrainingResult(
            episodes=episodes_list,
            total_episodes=count,
            terminated_episodes=terminated_episodes,
            average_reward=total_reward / count if count else 0.0,
            average_steps=total_steps / count if count else 0.0
        )
