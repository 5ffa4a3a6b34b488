#! /usr/bin/env python
# vim: expandtab shiftwidth=4 softtabstop=4 tabstop=17 filetype=python :
"""TLS server context from a key store entry."""

import OpenSSL.crypto as _crypto
from OpenSSL import SSL

from .certlib import CERT_ALIAS


def server_context(store, password, alias=CERT_ALIAS,
                   method=SSL.TLS_SERVER_METHOD):
    """Returns an SSL.Context serving the certificate stored under alias.

    Raises AuthenticationError on a wrong password, and SSL.Error if the
    key does not belong to the certificate."""
    private_key = store.get_key(alias, password)
    certificate = store.get_certificate(alias)

    context = SSL.Context(method)
    context.use_certificate(_crypto.X509.from_cryptography(certificate))
    context.use_privatekey(_crypto.PKey.from_cryptography_key(private_key))
    context.check_privatekey()
    return context
