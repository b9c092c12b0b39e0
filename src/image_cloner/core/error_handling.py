# src/image_cloner/core/error_handling.py

import functools
import logging
import time

from botocore.exceptions import BotoCoreError, ClientError

from .constants import RETRY_DELAY_SECONDS, RETRY_MAX_ATTEMPTS
from .exceptions import Ec2Error, ImageNotFoundError


def with_error_handling(func):
    """
    A decorator that turns botocore failures into Ec2Error.

    Anything else is logged and re-raised untouched.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__ + '.' + func.__name__)
        try:
            return func(*args, **kwargs)
        except Ec2Error:
            raise
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error in '{func.__name__}': {e}", exc_info=True)
            raise Ec2Error(
                f"Call to {func.__name__.lstrip('_')} failed: {e}",
                operation=func.__name__.lstrip('_'),
            ) from e
        except Exception as e:
            logger.error(f"Unexpected error in '{func.__name__}': {e}", exc_info=True)
            raise
    return wrapper


def retry_ec2_operation(max_attempts=RETRY_MAX_ATTEMPTS,
                        initial_delay=RETRY_DELAY_SECONDS,
                        backoff_factor=1):
    """
    Decorator to retry EC2 operations.

    The default backoff factor of 1 keeps the delay fixed between attempts.
    ImageNotFoundError is never retried: an empty describe result is an
    answer, not a transient failure.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(func.__module__ + '.' + func.__name__)
            attempts = 0
            delay = initial_delay
            while True:
                try:
                    return func(*args, **kwargs)
                except ImageNotFoundError:
                    raise
                except Ec2Error as e:
                    attempts += 1
                    if attempts >= max_attempts:
                        logger.error(
                            f"EC2 operation '{func.__name__}' failed after {max_attempts} attempts. Error: {e}"
                        )
                        raise
                    logger.info(
                        f"EC2 operation '{func.__name__}' failed. Attempt {attempts}/{max_attempts}. "
                        f"Retrying in {delay:.2f}s. Error: {e}"
                    )
                    time.sleep(delay)
                    delay *= backoff_factor
        return wrapper
    return decorator
