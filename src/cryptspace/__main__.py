#!/usr/bin/env python3
"""
cryptspace - encrypted copies of local files, one workspace per directory

Every tracked file is stored as an entry in a single JSON store:
    path           absolute path of the file (the key)
    size           plaintext length when it was added
    mode           permission bits, restored on fetch
    modified_time  RFC 3339 UTC mtime when it was added
    ciphertext     base64 of a self-describing AES-256-GCM blob

Store location:
    <store-dir>/<sha1(local root)>.json   store-dir: --store-dir, $CRYPTSPACE_HOME or ~/.cryptspace

Commands:
  init                 Create the workspace store for the current directory
  list, ls             List tracked files
  add <path>           Encrypt a file, or every file under a directory (asks first)
  remove, rm <path>    Stop tracking a file
  fetch [filter]       Decrypt matching files back to their paths (asks first)
  show <path>          Print decrypted contents
  destroy              Delete the workspace store (asks first)
  info                 Show store path and totals
  backup               Copy the store to <store>.backup.<timestamp>
  rotate               Re-encrypt every file under a new passphrase

Security choices:
  - AEAD: AES-256-GCM via cryptography.hazmat
  - Argon2id via argon2-cffi low-level API, fresh salt per file
  - key = Argon2id(SHA3-512(passphrase)) -> 32 bytes
"""
from __future__ import annotations

import logging
import sys

from cryptspace.ui.cli import build_parser
from cryptspace.utils.errors import Aborted, WorkspaceError


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        args.func(args)
    except Aborted:
        print("[!] Aborted")
        return 1
    except WorkspaceError as e:
        print(f"[!] {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
