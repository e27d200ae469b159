import argparse
import json
import logging
import os
import sys

import yaml

from fieldmask.config.models import MaskingFile
from fieldmask.core.errors import ConfigurationError
from fieldmask.masks import build_configuration
from fieldmask.utils.io import parse_records, write_records

logger = logging.getLogger("fieldmask.cli")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Mask fields of JSON records")
    parser.add_argument("--config", default=os.getenv("FIELDMASK_CONFIG_PATH", "masking.yml"))
    parser.add_argument("--seed", type=int, default=None, help="Seed for random masks")
    parser.add_argument(
        "--all-errors",
        action="store_true",
        help="Report every masking failure of a record, not only the last one",
    )
    parser.add_argument(
        "--strict", action="store_true", help="Exit with status 1 if any record failed"
    )
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument("path", nargs="?", help="JSON, JSON array or JSON Lines file (default: stdin)")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        stream=sys.stderr,
        format="%(asctime)s - %(levelname)8s - %(name)s - %(message)s",
    )

    try:
        cfg = MaskingFile.from_yaml(args.config, seed=args.seed)
        engine = build_configuration(cfg.masking, cfg.seed, args.all_errors).as_engine()
    except (ConfigurationError, yaml.YAMLError, OSError) as e:
        logger.error("invalid configuration %s: %s", args.config, e)
        return 2

    if args.path:
        with open(args.path, "r", encoding="utf-8") as f:
            content = f.read()
    else:
        content = sys.stdin.read()

    try:
        records = parse_records(content)
    except json.JSONDecodeError as e:
        logger.error("invalid JSON input: %s", e)
        return 1

    failed = 0
    masked = []
    for i, rec in enumerate(records):
        out, err = engine.mask_record(rec)
        if err is not None:
            failed += 1
            logger.warning("record %d: %s", i, err)
        masked.append(out)

    write_records(masked, sys.stdout)
    if failed:
        logger.info("%d of %d records had masking failures", failed, len(records))
    return 1 if failed and args.strict else 0


if __name__ == "__main__":
    sys.exit(main())
