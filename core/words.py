"""
core/words.py — Target word bank and chaos-mode corruption for TYPErun.

Short, lowercase dev/ops jargon, six letters or fewer. Any list of
lowercase strings can stand in for WORD_LIST; the engine only needs
len() and indexing.

Randomness comes from an injected source with random() and randrange(n).
random.Random satisfies it, so tests pass random.Random(seed) or a
scripted fake and get deterministic words.
"""

from __future__ import annotations
import string
from typing import Protocol, Sequence


class RandomSource(Protocol):
    """The two draws the engine needs from a random generator."""

    def random(self) -> float: ...

    def randrange(self, stop: int) -> int: ...


# ── Word bank ─────────────────────────────────────────────────────────────────
WORD_LIST: tuple[str, ...] = (
    # AI / LLM
    "token", "prompt", "rag", "vector", "memory", "window", "feature",
    # Kubernetes / cloud
    "helm", "kind", "k9s", "aws", "az",
    # Docker / containers
    "docker", "image", "volume", "build", "push", "pull", "run", "exec",
    # Linux / CLI
    "ls", "cd", "pwd", "cp", "mv", "rm", "cat", "tail",
    "head", "grep", "awk", "sed", "chmod",
    "ps", "top", "htop", "kill", "curl", "wget",
    "ssh", "scp", "ping", "uname", "dmesg",
    "mount", "umount", "df", "du",
    # Systems / dev
    "cache", "queue", "stack", "heap", "mutex",
    "thread", "async", "await", "event",
    "socket", "tcp", "udp", "http", "https",
    "json", "yaml", "proto",
    "redis", "mysql", "sqlite",
    "nginx", "proxy", "load",
    "auth", "debug", "trace",
    "hash", "crypt", "sha",
    "vscode", "vim", "nano",
    "linux", "unix", "posix",
)

# Words shorter than this are never corrupted
MIN_CORRUPT_LEN = 3

_INSERT_BELOW = 0.3
_DELETE_BELOW = 0.6


def pick_word(words: Sequence[str], rng: RandomSource) -> str:
    """Return a uniformly random entry of words."""
    return words[rng.randrange(len(words))]


def corrupt_word(word: str, rng: RandomSource) -> str:
    """Apply exactly one typo-style edit to word.

    One draw r in [0, 1) picks the edit:
        r < 0.3        insert a random lowercase letter at [0, len]
        0.3 <= r < 0.6 delete the character at [0, len - 1]
        r >= 0.6       swap two adjacent characters at [0, len - 2]

    Words shorter than MIN_CORRUPT_LEN come back unchanged.

    Args:
        word: The clean target word.
        rng:  Random source for the edit choice and its position.

    Returns:
        The corrupted word.
    """
    if len(word) < MIN_CORRUPT_LEN:
        return word

    r = rng.random()
    if r < _INSERT_BELOW:
        char = string.ascii_lowercase[rng.randrange(26)]
        pos = rng.randrange(len(word) + 1)
        return word[:pos] + char + word[pos:]

    if r < _DELETE_BELOW:
        pos = rng.randrange(len(word))
        return word[:pos] + word[pos + 1:]

    if len(word) < 2:
        return word
    pos = rng.randrange(len(word) - 1)
    return word[:pos] + word[pos + 1] + word[pos] + word[pos + 2:]
