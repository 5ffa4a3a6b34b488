#! /usr/bin/env python
# vim: expandtab shiftwidth=4 softtabstop=4 tabstop=17 filetype=python :
"""Self-signed certificates and key stores for bootstrapping local TLS."""

import logging

from .certlib import (
    CERT_ALIAS,
    DISTINGUISHED_NAME,
    KEY_PAIR_ALGORITHM,
    KEY_SIZE,
    SIGNATURE_ALGORITHM,
    build_self_signed_certificate,
    generate_key_pair,
)
from .errors import (
    ConfigurationError,
    GenerationError,
    NameFormatError,
    SigningError,
)
from .keystore import (
    STORE_FORMAT,
    create_store,
)
from .pem import export_to_pem

LOG = logging.getLogger(name="selfsign")


def generate_cert_keystore(validity_days, password,
                           distinguished_name=DISTINGUISHED_NAME,
                           signature_algorithm=SIGNATURE_ALGORITHM):
    """Returns a key store holding a fresh key and a self-signed certificate
    for distinguished_name under the alias "cert".

    validity_days is the number of days the certificate will be valid for,
    password protects both the store and the entry."""
    try:
        pair = generate_key_pair(KEY_PAIR_ALGORITHM, KEY_SIZE)
        cert = build_self_signed_certificate(distinguished_name, pair,
                                             validity_days,
                                             signature_algorithm)
        store = create_store(STORE_FORMAT, password)
        store.set_entry(CERT_ALIAS, pair.private_key, password, cert)
    except (GenerationError, NameFormatError, SigningError) as exc:
        raise ConfigurationError(
            "SSL is enabled but a key store could not be created. "
            "A key store is required for SSL to be used.") from exc
    LOG.debug("Generated key store for %s", distinguished_name)
    return store


def export_to_pem_file(key_store, password, output_file):
    """Writes the key and certificate of key_store to output_file as PEM,
    readable by the owner only"""
    export_to_pem(key_store, CERT_ALIAS, password, output_file)
