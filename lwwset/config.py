import os


class Config:
    """Reads replica configuration from environment variables."""

    def __init__(self):
        self.replica_id = os.getenv("REPLICA_ID", "replica-1")
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        # "console" for humans, "json" for log shippers
        self.log_format = os.getenv("LOG_FORMAT", "console").lower()

        # spacing of the fixed timestamps used by the reference scenarios
        self.scenario_step_minutes = max(int(os.getenv("SCENARIO_STEP_MINUTES", "10")), 1)


config = Config()
