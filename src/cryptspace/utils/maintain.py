import argparse

from cryptspace.ui.prompt import get_passphrase
from cryptspace.utils.core import open_workspace
from cryptspace.utils.errors import PassphraseError


def cmd_remove(args: argparse.Namespace) -> None:
    ws = open_workspace(args)
    if ws.remove(args.path):
        print(f"[+] Removed {args.path}")
    else:
        print(f"[+] {args.path} was not tracked")


def cmd_destroy(args: argparse.Namespace) -> None:
    ws = open_workspace(args)
    ws.destroy()
    print("[+] Workspace has been destroyed")


def cmd_info(args: argparse.Namespace) -> None:
    info = open_workspace(args).info()
    print("workspace info:")
    print("* local path:", info["local_root"])
    print("* store path:", info["store_path"])
    print("* files tracked:", info["files"])
    print("* total size:", info["bytes"], "bytes")


def cmd_backup(args: argparse.Namespace) -> None:
    target = open_workspace(args).backup()
    print(f"[+] Backed up store to {target}")


def cmd_rotate(args: argparse.Namespace) -> None:
    """Re-encrypt every tracked file under a new passphrase.

    The new passphrase comes from --new-passphrase or is asked twice on the
    terminal.
    """
    ws = open_workspace(args, with_passphrase=True)
    new_passphrase = args.new_passphrase
    if not new_passphrase:
        new_passphrase = get_passphrase(prompt="New passphrase: ", from_env=False)
        if get_passphrase(prompt="Repeat new passphrase: ", from_env=False) != new_passphrase:
            raise PassphraseError("passphrases do not match")
    count = ws.rotate(new_passphrase)
    print(f"[+] Passphrase rotated for {count} files.")
