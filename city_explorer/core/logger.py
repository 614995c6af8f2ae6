import logging
import os
from logging.handlers import RotatingFileHandler
from city_explorer.core.config import settings

class LoggerConfig:
    """
    Sets up the City Explorer logger: a size-rotated file under LOG_DIRECTORY
    plus the console, both at the level configured by LOGGER.
    """
    def __init__(
        self,
        env=20,
        logger_name="CITY-EXPLORER",
        log_directory="logs",
        log_file="city_explorer.log",
        max_bytes=10 * 1024 * 1024,
        backup_count=5,
    ):
        try:
            self.logger_name = logger_name
            self.log_directory = os.path.abspath(log_directory)
            self.log_file_path = os.path.join(self.log_directory, log_file)
            self.env = env
            self.max_bytes = max_bytes
            self.backup_count = backup_count
            self.log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

            self.logger = logging.getLogger(self.logger_name)
            self.setup_logger()
        except Exception as e:
            print(f"City Explorer logger could not be created: {str(e)}")

    def setup_logger(self):
        try:
            os.makedirs(self.log_directory, exist_ok=True)
            formatter = logging.Formatter(self.log_format)

            # uvicorn --reload imports the app twice; keep one set of handlers
            if not self.logger.handlers:
                handlers = [
                    RotatingFileHandler(
                        self.log_file_path,
                        maxBytes=self.max_bytes,
                        backupCount=self.backup_count,
                        encoding="utf-8",
                    ),
                    logging.StreamHandler(),
                ]
                for handler in handlers:
                    handler.setLevel(self.env)
                    handler.setFormatter(formatter)
                    self.logger.addHandler(handler)

            self.logger.setLevel(self.env)

        except Exception as e:
            print(f"City Explorer log handlers could not be attached: {str(e)}")

    def log(self, level: int, message: str, extra: dict = None, exc_info: bool = False):
        """Logs message, with any request context appended as ' | {...}'"""
        if extra:
            message = f"{message} | {extra}"
        self.logger.log(level, message, exc_info=exc_info)

logs = LoggerConfig(
    env=settings.LOGGER,
    logger_name="CITY-EXPLORER",
    log_directory=settings.LOG_DIRECTORY,
    log_file=settings.LOG_FILE,
    max_bytes=settings.LOG_MAX_BYTES,
    backup_count=settings.LOG_BACKUP_COUNT,
)
