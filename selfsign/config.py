#! /usr/bin/env python
# vim: expandtab shiftwidth=4 softtabstop=4 tabstop=17 filetype=python :
"""selfsign.config is a helper library that standardizes and collects the
logic in one place used by the selfsign CLI tools/scripts"""

import argparse
import logging
import os
from logging.config import dictConfig

import plaster
import pyramid.paster as paster
from pyramid.settings import asbool

from .certlib import DISTINGUISHED_NAME, VALIDITY

ENV_PREFIX = "SELFSIGN_"
SETTINGS_SECTION = "selfsign"

LOG_LEVEL = {
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

DEFAULT_LOGGING_CONFIG = {
    "version": 1,
    "formatters": {
        "generic": {
            "format": "%(asctime)s %(levelname)-5.5s [%(name)s][%(threadName)s]"
            "%(message)s"
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
            "level": "NOTSET",
            "formatter": "generic",
        },
    },
    "loggers": {
        "": {  # root logger
            "handlers": ["console"],
            "level": "INFO",
        },
        "selfsign": {
            "level": "DEBUG",
            "qualname": "selfsign",
        },
    },
}

DEFAULT_SETTINGS = {
    "validity.days": str(VALIDITY),
    "dn": DISTINGUISHED_NAME,
    "output": "selfsign.pem",
    "legacy_sha1": "false",
}


def add_inifile_argument(parser, env=None):
    """Adds an argument to the parser for the config-file, defaults to
    SELFSIGN_INI in the environment"""
    if env is None:
        env = os.environ
    default_ini = env.get(ENV_PREFIX + "INI")

    parser.add_argument(
        nargs="?",
        help="Path to a specific .ini-file to use as config",
        dest="inifile",
        default=default_ini,
        type=str,
    )


def add_verbosity_argument(parser):
    """Adds an argument for verbosity to a given parser, counting the amount of
    'v's and 'verbose' on the commandline"""
    parser.add_argument(
        "-v",
        "--verbose",
        help="Verbosity of root logger, increasing the more 'v's are added",
        action="count",
        default=0,
    )


def add_certificate_arguments(parser):
    """Adds the validity, distinguished name and signature arguments"""
    parser.add_argument(
        "-d",
        "--validity-days",
        help="Number of days the certificate is valid for",
        type=int,
    )
    parser.add_argument(
        "--dn",
        help="Distinguished name of the certificate owner",
        type=str,
    )
    parser.add_argument(
        "--legacy-sha1",
        help="Sign with SHA1withRSA, for consumers that need it",
        action="store_true",
        default=None,
    )


def add_password_argument(parser):
    """Adds an argument for the key store password"""
    parser.add_argument(
        "-p",
        "--password",
        help="Password protecting the key store, prefer SELFSIGN_PASSWORD",
        type=str,
    )


def add_output_arguments(parser):
    """Adds arguments for the PEM and PKCS#12 output paths"""
    parser.add_argument(
        "-o",
        "--output",
        help="Path to write the PEM key and certificate to",
        type=str,
    )
    parser.add_argument(
        "--pkcs12",
        help="Path to also write the key store to as PKCS#12",
        type=str,
    )


def _get_config_value(
    arguments: argparse.Namespace,
    variable,
    required=False,
    setting_name=None,
    settings=None,
    default=None,
    env=None,
):
    """Returns what value to use for a given config variable, prefer argument >
    env-variable > config-file, if a value cant be found and default is not
    None, default is returned"""
    result = None
    if setting_name is None:
        setting_name = variable
    if settings is not None:
        result = settings.get(setting_name, result)

    if env is None:
        env = os.environ
    env_var = ENV_PREFIX + variable.upper().replace("-", "_")
    result = env.get(env_var, result)

    arg_value = getattr(arguments, variable, result)
    result = arg_value if arg_value is not None else result

    if result is None:
        result = default

    if required and result is None:
        raise ValueError(
            f"No {variable} could be found as either an argument,"
            f" in the environment variable {env_var} or in the config file",
            variable,
            env_var,
        )
    return result


def get_validity_days(arguments, settings=None, env=None):
    """Returns the validity of generated certificates in days"""
    value = _get_config_value(
        arguments,
        variable="validity_days",
        setting_name="validity.days",
        settings=settings,
        default=VALIDITY,
        env=env,
    )
    return int(value)


def get_password(arguments, settings=None, required=True, env=None):
    """Returns the key store password"""
    return _get_config_value(
        arguments,
        variable="password",
        required=required,
        settings=settings,
        env=env,
    )


def get_distinguished_name(arguments, settings=None, env=None):
    """Returns the distinguished name of the certificate owner"""
    return _get_config_value(
        arguments,
        variable="dn",
        settings=settings,
        default=DISTINGUISHED_NAME,
        env=env,
    )


def get_output_paths(arguments, settings=None, required=True, env=None):
    """Returns the PEM output path and the optional PKCS#12 path"""
    pem_path = _get_config_value(
        arguments,
        variable="output",
        required=required,
        settings=settings,
        env=env,
    )
    pkcs12_path = _get_config_value(
        arguments,
        variable="pkcs12",
        settings=settings,
        env=env,
    )
    return pem_path, pkcs12_path


def get_legacy_sha1(arguments, settings=None, env=None):
    """Returns whether to sign with the legacy SHA1withRSA algorithm"""
    value = _get_config_value(
        arguments,
        variable="legacy_sha1",
        settings=settings,
        default=False,
        env=env,
    )
    return asbool(value)


def get_log_level(argument_level, logger=None, env=None):
    """Calculates the highest verbosity(here inverted) from the argument,
    environment and root, capping it to between logging.DEBUG(10)-logging.ERROR(40),
    returning the log level"""

    if env is None:
        env = os.environ
    env_level_name = env.get(ENV_PREFIX + "LOG_LEVEL", "ERROR").upper()
    env_level = LOG_LEVEL[env_level_name]

    if logger is None:
        logger = logging.getLogger()
    current_level = logger.level

    argument_verbosity = logging.ERROR - argument_level * 10  # level steps are 10
    verbosity = min(argument_verbosity, env_level, current_level)
    log_level = (
        verbosity if logging.DEBUG <= verbosity <= logging.ERROR else logging.ERROR
    )
    return log_level


def configure_log_level(arguments: argparse.Namespace, logger=None):
    """Sets the root loggers level to the highest verbosity from the argument,
    environment and config-file"""
    log_level = get_log_level(arguments.verbose)
    if logger is None:
        logger = logging.getLogger()
    logger.setLevel(log_level)


def setup_logging(config_path=None):
    """wrapper for pyramid.paster.setup_logging using file at config_path, if
    no config_path is passed on use dictionary DEFAULT_LOGGING_CONFIG"""
    if config_path:
        paster.setup_logging(config_path)
    else:
        dictConfig(DEFAULT_LOGGING_CONFIG)


def get_settings(config_path=None):
    """Returns a copy of DEFAULT_SETTINGS, updated from the [selfsign]
    section of the file at config_path through plaster if one is given"""
    settings = dict(DEFAULT_SETTINGS)
    if config_path:
        settings.update(plaster.get_settings(config_path, SETTINGS_SECTION))
    return settings
