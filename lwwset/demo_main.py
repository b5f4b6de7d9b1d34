"""
Demo entry point. Runs the reference replica scenarios and logs the outcome.
"""
import logging
import sys
from typing import Optional

import structlog

from lwwset.config import Config, config as default_config
from lwwset.scenarios import run_all

log = structlog.get_logger()


def configure_logging(config: Config):
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, config.log_level, logging.INFO),
        force=True,
    )

    if config.log_format == "json":
        renderer = structlog.processors.JSONRenderer(default=str)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def main(config: Optional[Config] = None):
    config = config or default_config
    configure_logging(config)

    log.info("demo_starting", replica_id=config.replica_id,
             step_minutes=config.scenario_step_minutes)

    results = run_all(config.scenario_step_minutes, replica_id=config.replica_id)
    failed = 0
    for result in results:
        bad = [c for c in result["checks"] if not c["ok"]]
        if bad:
            failed += 1
            for check in bad:
                log.error(
                    "check_failed",
                    scenario=result["scenario"],
                    description=check["description"],
                    expected=check["expected"],
                    actual=check["actual"],
                )
        log.info(
            "scenario_finished",
            scenario=result["scenario"],
            status=result["status"],
            checks=len(result["checks"]),
            active_elements=result["state"].get("active_elements"),
        )

    log.info("demo_finished", scenarios=len(results), failed=failed)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
