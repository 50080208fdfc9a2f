# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import json
import logging
import sys
from typing import Optional, Sequence

from spindle.common.config_dump import dump_config
from spindle.common.configuration.utils import env_or_default
from spindle.launcher.args import parse_args
from spindle.runtime.logging import configure_spindle_logging


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Resolve the launch configuration and write it to stdout as JSON."""
    configure_spindle_logging()

    config = parse_args(argv)
    logging.info(f"Resolved launch configuration: {config}")

    dump_to = env_or_default("SPINDLE_DUMP_CONFIG_TO", None)
    if dump_to:
        dump_config(config, dump_to)

    json.dump(config.to_dict(), sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
