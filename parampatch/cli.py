# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""Apply a patch-spec file to a stored entity.

Usage:
    patch-apply --entity-id <uuid> --file <patch-spec>          # apply
    patch-apply --entity-id <uuid> --file <patch-spec> --check  # validate only

Exit codes: 0 on success, 1 when the patch does not match the entity,
2 for unusable input (bad arguments, unreadable patch spec, unknown entity).
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import LOG_FORMAT, PARAMPATCH_LOG_LEVEL, PARAMPATCH_STORE_DIR, PARAMPATCH_STRICT_TARGET
from .errors import EntityNotFoundError, PatchError, PatchSpecError, StoreCorruptError
from .models import Entity, Patch
from .services.applier import PatchApplier
from .services.patch_spec import load_patch_spec
from .stores.json_store import JSONParameterStore

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PATCH_ERROR = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="patch-apply",
        description="Apply compare-and-set parameter changes to a stored entity.",
    )
    parser.add_argument("--entity-id", help="entity to patch (defaults to the patch spec's target)")
    parser.add_argument("--file", required=True, type=Path, help="patch spec (.json or .kts)")
    parser.add_argument("--store-dir", default=PARAMPATCH_STORE_DIR, help="directory of entity JSON files")
    parser.add_argument("--check", action="store_true", help="validate the patch without saving")
    parser.add_argument(
        "--remove-on-success",
        action="store_true",
        help="delete the patch spec once it has been applied",
    )
    return parser


def _already_applied(entity: Entity, patch: Patch) -> bool:
    return all(entity.params.get(c.key) == c.new_value for c in patch)


def run(args: argparse.Namespace) -> int:
    name = args.file.name

    try:
        patch = load_patch_spec(args.file)
    except PatchSpecError as e:
        print(f"  FAIL  {name}: {e}")
        return EXIT_USAGE

    entity_id = args.entity_id or patch.entity_id
    if not entity_id:
        print(f"  FAIL  {name}: no --entity-id given and the patch spec names no target")
        return EXIT_USAGE

    store = JSONParameterStore(args.store_dir)
    try:
        entity = store.load(entity_id)
    except EntityNotFoundError:
        print(f"  FAIL  {name}: entity '{entity_id}' not found in {store.store_dir}")
        return EXIT_USAGE
    except StoreCorruptError as e:
        print(f"  FAIL  {name}: {e}")
        return EXIT_USAGE
    except ValueError as e:
        print(f"  FAIL  {name}: {e}")
        return EXIT_USAGE

    applier = PatchApplier(strict_target=PARAMPATCH_STRICT_TARGET)
    try:
        if args.check:
            applier.check(entity, patch)
            print(f"  OK    {name}: {len(patch)} change(s) apply cleanly to {entity_id}")
            return EXIT_OK

        applier.apply(entity, patch)
    except PatchSpecError as e:
        print(f"  FAIL  {name}: {e}")
        return EXIT_USAGE
    except PatchError as e:
        print(f"  FAIL  {name}: {e.error_code} on {entity_id}")
        print(f"        key: {e.key}")
        print(f"        expected: {e.expected!r}")
        print(f"        actual: {e.actual!r}")
        if _already_applied(entity, patch):
            print("        all parameters already hold their new values; was this patch applied before?")
        return EXIT_PATCH_ERROR

    store.save(entity)
    print(f"  DONE  {name}: applied {len(patch)} change(s) to {entity_id}")

    if args.remove_on_success:
        try:
            args.file.unlink()
        except OSError as e:
            print(f"        could not remove {args.file}: {e}")
        else:
            print(f"        removed {args.file}")

    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=PARAMPATCH_LOG_LEVEL, format=LOG_FORMAT, stream=sys.stderr)
    args = build_parser().parse_args(argv)
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
