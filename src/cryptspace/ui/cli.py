import argparse
import os

from cryptspace.utils.core import cmd_add, cmd_fetch, cmd_init, cmd_list, cmd_show
from cryptspace.utils.dataModels import DEFAULT_T_COST, DEFAULT_M_COST_KiB, DEFAULT_PARALLELISM
from cryptspace.utils.maintain import cmd_backup, cmd_destroy, cmd_info, cmd_remove, cmd_rotate


def _common_options() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--root", default=os.getcwd(), help="Local directory the workspace belongs to (default: cwd)")
    common.add_argument("--store-dir", help="Directory holding workspace stores (default: $CRYPTSPACE_HOME or ~/.cryptspace)")
    common.add_argument("--store", help="Explicit metadata file, overrides --store-dir")
    common.add_argument("--passphrase", help="Workspace passphrase (default: $CRYPTSPACE_PASSPHRASE or prompt)")
    common.add_argument("-t", type=int, default=DEFAULT_T_COST, help="Argon2 time cost (iterations)")
    common.add_argument("-m", type=int, default=DEFAULT_M_COST_KiB, help="Argon2 memory (KiB)")
    common.add_argument("-p", type=int, default=DEFAULT_PARALLELISM, help="Argon2 parallelism")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return common


def build_parser() -> argparse.ArgumentParser:
    common = _common_options()
    p = argparse.ArgumentParser(prog="cryptspace", description="Encrypted copies of local files, kept in one workspace store")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_init = sub.add_parser("init", parents=[common], help="Init a new workspace")
    p_init.set_defaults(func=cmd_init)

    p_ls = sub.add_parser("list", aliases=["ls"], parents=[common], help="List files in the current workspace")
    p_ls.set_defaults(func=cmd_list)

    p_add = sub.add_parser("add", parents=[common], help="Add a new file or directory to the workspace")
    p_add.add_argument("path", help="File or directory to encrypt")
    p_add.set_defaults(func=cmd_add)

    p_rm = sub.add_parser("remove", aliases=["rm"], parents=[common], help="Remove a file from the workspace")
    p_rm.add_argument("path", help="Tracked file path")
    p_rm.set_defaults(func=cmd_remove)

    p_fetch = sub.add_parser("fetch", parents=[common], help="Decrypt tracked files back to their paths")
    p_fetch.add_argument("filter", nargs="?", help="Only fetch paths containing this text")
    p_fetch.set_defaults(func=cmd_fetch)

    p_show = sub.add_parser("show", parents=[common], help="Show file contents")
    p_show.add_argument("path", help="Tracked file path")
    p_show.set_defaults(func=cmd_show)

    p_destroy = sub.add_parser("destroy", parents=[common], help="Destroy workspace")
    p_destroy.set_defaults(func=cmd_destroy)

    p_info = sub.add_parser("info", parents=[common], help="Show workspace info")
    p_info.set_defaults(func=cmd_info)

    p_backup = sub.add_parser("backup", parents=[common], help="Copy the workspace store next to itself")
    p_backup.set_defaults(func=cmd_backup)

    p_rot = sub.add_parser("rotate", parents=[common], help="Re-encrypt all files under a new passphrase")
    p_rot.add_argument("--new-passphrase", help="New passphrase (default: prompt)")
    p_rot.set_defaults(func=cmd_rotate)

    return p
