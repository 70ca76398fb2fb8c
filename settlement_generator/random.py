"""
Random number generator with seed support
"""
import math
import time


class Random:
    """
    Linear congruential generator (Park-Miller, multiplier 48271).

    Every component that needs randomness receives the same instance, so a
    settlement is fully determined by its seed and parameters.
    """

    g = 48271
    n = 2147483647

    def __init__(self, seed=None):
        self.reset(seed)

    def reset(self, seed=None):
        """Reset random seed"""
        if seed is None:
            seed = int(time.time() * 1000)
        self.seed = int(seed) % self.n
        if self.seed <= 0:
            self.seed = 1

    def get_seed(self):
        """Get current seed"""
        return self.seed

    def _next(self):
        self.seed = (self.seed * self.g) % self.n
        return self.seed

    def float(self):
        """Random float in [0, 1)"""
        return self._next() / self.n

    def normal(self):
        """Normalized random (average of 3 floats)"""
        return (self.float() + self.float() + self.float()) / 3

    def int(self, min_val, max_val):
        """Random integer in [min, max)"""
        return math.floor(min_val + self._next() / self.n * (max_val - min_val))

    def bool(self, chance=0.5):
        """Random boolean with given chance"""
        return self.float() < chance

    def fuzzy(self, f=1.0):
        """Fuzzy random value"""
        if f == 0:
            return 0.5
        return (1 - f) / 2 + f * self.normal()

    def choice(self, items):
        """Uniformly random element of a non-empty sequence"""
        return items[math.floor(self.float() * len(items))]
