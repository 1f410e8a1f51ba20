#!/usr/bin/env python3
# platform_manager.py
"""
Helper functions for the hosting platform: parameters and logging.

Parameters are read from the environment first. When a base path is given,
names missing from the environment are looked up in AWS Parameter Store.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator

import boto3

DEFAULT_REGION = "us-east-1"

""" AWS Parameter Store """


def _chunk(iterable: Iterable[str], size: int) -> Iterator[list[str]]:
    """
    Chunk an iterable into lists of size `size`.
    Used for SSM get_parameters batching because the API only allows up to 10 names at a time.
    """
    it = iter(iterable)
    while True:
        chunk = list([x for _, x in zip(range(size), it, strict=False)])
        if not chunk:
            break
        yield chunk


def _get_ssm_parameters(
    param_names: list[str], base_path: str, *, decrypt: bool, region_name: str
) -> dict[str, str]:
    """Fetch parameters under `base_path` by leaf name. Missing names are omitted."""
    ssm = boto3.client("ssm", region_name=region_name)

    # Normalize base_path (exactly one trailing slash)
    base = base_path.rstrip("/") + "/"

    to_fetch = [base + name for name in param_names]
    leaf_by_full = {base + name: name for name in param_names}

    found: dict[str, str] = {}
    for group in _chunk(to_fetch, 10):  # SSM get_parameters max 10 names
        resp = ssm.get_parameters(Names=group, WithDecryption=decrypt)

        for p in resp.get("Parameters", []):
            full = p["Name"]
            leaf = leaf_by_full.get(full)
            if leaf is not None:
                found[leaf] = p["Value"]

    return found


def get_parameters(
    param_names: list[str] | str,
    base_path: str | None = None,
    *,
    decrypt: bool = False,
    region_name: str | None = None,
) -> dict[str, str | None]:
    """
    Retrieve parameters by name.

    Environment variables are checked first, using the upper-cased name. Any name
    not set in the environment is fetched from Parameter Store under `base_path`
    (lower-cased leaf) when a base path is given.

    Args:
        param_names: A name or list of names to retrieve.
        base_path: Parameter Store path; None disables the SSM fallback.
        decrypt: Decrypt SecureString parameters.
        region_name: AWS region. Defaults to AWS_REGION or us-east-1.

    Returns:
        dict: Lower-cased name -> value, or None when the parameter is not set anywhere.
    """
    if isinstance(param_names, str):
        param_names = [param_names]

    # Pre-fill with None so missing params are explicit
    result: dict[str, str | None] = {name.lower(): None for name in param_names}

    for name in result:
        value = os.getenv(name.upper())
        if value:
            result[name] = value

    missing = [name for name, value in result.items() if value is None]
    if base_path and missing:
        region = region_name or os.getenv("AWS_REGION", DEFAULT_REGION)
        result.update(_get_ssm_parameters(missing, base_path, decrypt=decrypt, region_name=region))

    return result


""" AWS CloudWatch """


def create_logger(log_level: str = "INFO", logger_name: str = __name__) -> logging.Logger:
    """
    Create a logger for AWS Lambda that outputs to CloudWatch.

    Args:
        log_level (str): Logging level (e.g., "INFO", "DEBUG").
        logger_name (str): Name for the logger instance.

    Returns:
        logging.Logger: Configured logger instance.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    # Check if the logger already has handlers to avoid duplication
    if not logger.handlers:
        # Create a console handler
        handler = logging.StreamHandler()

        # Create a formatter and set it for the handler
        formatter = logging.Formatter("[%(levelname)s] %(message)s")
        handler.setFormatter(formatter)

        # Add the handler to the logger
        logger.addHandler(handler)

    return logger
