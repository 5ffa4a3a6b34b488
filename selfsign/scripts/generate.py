#! /usr/bin/env python3
# vim: expandtab shiftwidth=4 softtabstop=4 tabstop=17 filetype=python :
"""Generate a self-signed certificate, write it out as PEM and PKCS#12."""

import argparse
import logging
import os
import sys

from selfsign import (
    config,
    export_to_pem_file,
    generate_cert_keystore,
)
from selfsign.certlib import (
    CERT_ALIAS,
    LEGACY_SIGNATURE_ALGORITHM,
    SIGNATURE_ALGORITHM,
)
from selfsign.errors import SelfSignError
from selfsign.pem import write_private_file

LOG = logging.getLogger(name="selfsign.generate")


def cmdline(argv=None):
    """Parse commandline."""
    parser = argparse.ArgumentParser()

    config.add_inifile_argument(parser)
    config.add_verbosity_argument(parser)
    config.add_certificate_arguments(parser)
    config.add_password_argument(parser)
    config.add_output_arguments(parser)

    args = parser.parse_args(argv)
    return args


def error_out(message, exc=None):
    """Log error message and exit with failure code."""
    LOG.error(message)
    if exc is not None:
        LOG.error(str(exc))
    sys.exit(1)


def ensure_parent(path):
    dname = os.path.dirname(path)
    if dname:
        os.makedirs(dname, exist_ok=True)


def generate(validity_days, password, distinguished_name, pem_path,
             pkcs12_path=None, legacy_sha1=False):
    """Generates a key store and writes it to pem_path and pkcs12_path."""
    algorithm = SIGNATURE_ALGORITHM
    if legacy_sha1:
        algorithm = LEGACY_SIGNATURE_ALGORITHM

    store = generate_cert_keystore(validity_days, password,
                                   distinguished_name, algorithm)
    entry = store.entry(CERT_ALIAS)
    LOG.info("Generated certificate for %s, sha256 %s",
             distinguished_name, entry.fingerprint)

    ensure_parent(pem_path)
    export_to_pem_file(store, password, pem_path)

    if pkcs12_path:
        ensure_parent(pkcs12_path)
        write_private_file(pkcs12_path, store.dump(CERT_ALIAS, password))
        LOG.info("Wrote key store to %s", pkcs12_path)
    return store


def main(argv=None):
    """Entrypoint of application."""
    args = cmdline(argv)
    config_path = args.inifile

    config.setup_logging(config_path)
    config.configure_log_level(args)

    settings = config.get_settings(config_path)

    try:
        password = config.get_password(args, settings)
        pem_path, pkcs12_path = config.get_output_paths(args, settings)
        validity_days = config.get_validity_days(args, settings)
    except ValueError as error:
        error_out("Error reading configuration", exc=error)

    if validity_days < 1:
        error_out(f"Validity must be at least one day, got {validity_days}")

    try:
        generate(
            validity_days,
            password,
            config.get_distinguished_name(args, settings),
            pem_path,
            pkcs12_path,
            config.get_legacy_sha1(args, settings),
        )
    except (SelfSignError, OSError) as error:
        error_out("Could not write key store", exc=error)


if __name__ == "__main__":
    main()
