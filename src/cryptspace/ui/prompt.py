"""Terminal adapters: passphrase acquisition and yes/no confirmation."""
import os

from getpass import getpass

from cryptspace.utils.dataModels import CONFIRM_ANSWER, ENV_PASSPHRASE
from cryptspace.utils.errors import PassphraseError


def get_passphrase(explicit: str | None = None, prompt: str = "Workspace passphrase: ",
                   from_env: bool = True) -> str:
    """Passphrase from the flag, then the environment, then the terminal."""
    passphrase = explicit or (os.environ.get(ENV_PASSPHRASE) if from_env else None)
    if not passphrase:
        try:
            passphrase = getpass(prompt)
        except EOFError as exc:
            raise PassphraseError("no passphrase supplied") from exc
    if not passphrase:
        raise PassphraseError("passphrase must not be empty")
    return passphrase


def require_confirmation(message: str) -> bool:
    print(message)
    try:
        answer = input(f"continue? ({CONFIRM_ANSWER}/no): ")
    except EOFError:
        return False
    return answer == CONFIRM_ANSWER
