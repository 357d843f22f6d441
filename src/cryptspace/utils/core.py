import argparse
import os
import sys

from pathlib import Path

from cryptspace.core.workspace import Workspace
from cryptspace.crypto.aead import PassphraseCipher
from cryptspace.ui.prompt import get_passphrase, require_confirmation
from cryptspace.utils.dataModels import KdfParams
from cryptspace.utils.errors import NotInitializedError
from cryptspace.utils.helper import resolve_path, store_home, store_path_for


def open_workspace(args: argparse.Namespace, with_passphrase: bool = False) -> Workspace:
    root = Path(os.path.abspath(args.root))
    store = Path(args.store) if args.store else store_path_for(root, store_home(args.store_dir))
    cipher = PassphraseCipher(KdfParams(t_cost=args.t, m_cost_kib=args.m, parallelism=args.p))
    ws = Workspace(root, store, confirm=require_confirmation, cipher=cipher)
    if with_passphrase:
        if not ws.exists():
            raise NotInitializedError()
        ws.passphrase = get_passphrase(args.passphrase)
    return ws


def cmd_init(args: argparse.Namespace) -> None:
    ws = open_workspace(args)
    ws.init()
    print(f"[+] Initialized workspace for {ws.local_root} at {ws.store_path}")


def cmd_list(args: argparse.Namespace) -> None:
    ws = open_workspace(args)
    entries = ws.list()
    if not entries:
        print("(empty)")
        return
    for e in entries:
        print(f"{e.path}\t{e.size} bytes\t{e.mode:o}\t{e.modified_time}")


def cmd_add(args: argparse.Namespace) -> None:
    ws = open_workspace(args, with_passphrase=True)
    target = resolve_path(ws.local_root, args.path)
    if os.path.isdir(target):
        added = ws.add_tree(target)
        if not added:
            print(f"[!] No files found under {target}")
            return
        print(f"[+] Encrypted and added {len(added)} files")
        return
    entry = ws.add(target)
    print(f"[+] Encrypted and added {entry.path} ({entry.size} bytes)")


def cmd_fetch(args: argparse.Namespace) -> None:
    ws = open_workspace(args, with_passphrase=True)
    fetched = ws.fetch_all(args.filter)
    if not fetched:
        print("did not find any files to fetch")
        return
    for path in fetched:
        print(f"[+] Fetched {path}")


def cmd_show(args: argparse.Namespace) -> None:
    ws = open_workspace(args, with_passphrase=True)
    content = ws.read(args.path)
    sys.stdout.flush()
    sys.stdout.buffer.write(content)
    sys.stdout.buffer.flush()
