"""
Shared pytest fixtures.

Argon2 is run with its minimum cost so the suite stays fast; the blob header
records whatever parameters were used, so nothing else changes.
"""

import pytest

from cryptspace.core.workspace import Workspace
from cryptspace.crypto.aead import PassphraseCipher
from cryptspace.utils.dataModels import KdfParams

PASSPHRASE = "correct horse battery staple"
CHEAP_KDF = KdfParams(t_cost=1, m_cost_kib=8, parallelism=1)
CHEAP_KDF_ARGS = ["-t", "1", "-m", "8", "-p", "1"]


class ScriptedConfirm:
    """Stand-in for the terminal prompt: records prompts, replays answers."""

    def __init__(self, answer: bool = True):
        self.answer = answer
        self.prompts = []

    def __call__(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self.answer


@pytest.fixture
def cipher():
    return PassphraseCipher(CHEAP_KDF)


@pytest.fixture
def confirm():
    return ScriptedConfirm(answer=True)


@pytest.fixture
def local_root(tmp_path):
    root = tmp_path / "home"
    root.mkdir()
    return root


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "store" / "workspace.json"


@pytest.fixture
def workspace(local_root, store_path, confirm, cipher):
    """An initialized, empty workspace."""
    ws = Workspace(local_root, store_path, passphrase=PASSPHRASE, confirm=confirm, cipher=cipher)
    ws.init()
    return ws


@pytest.fixture
def reopen(local_root, store_path, confirm, cipher):
    """Build a fresh Workspace over the same store, as a new process would."""
    def _reopen(passphrase: str = PASSPHRASE) -> Workspace:
        return Workspace(local_root, store_path, passphrase=passphrase, confirm=confirm, cipher=cipher)
    return _reopen
