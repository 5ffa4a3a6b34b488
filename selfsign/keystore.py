#! /usr/bin/env python
# vim: expandtab shiftwidth=4 softtabstop=4 tabstop=17 filetype=python :
"""Password protected, aliased storage of private keys and certificates."""

import logging

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.serialization import pkcs12
from pyramid.decorator import reify as _reify

from .certlib import CERT_ALIAS
from .errors import (
    AuthenticationError,
    GenerationError,
)

LOG = logging.getLogger(name="selfsign.keystore")

STORE_FORMAT = "PKCS12"
STORE_FORMATS = (STORE_FORMAT, )


def _password_bytes(password):
    if password is None:
        return b""
    if isinstance(password, bytes):
        return password
    return password.encode("utf8")


def _protection(password):
    password = _password_bytes(password)
    if not password:
        return serialization.NoEncryption()
    return serialization.BestAvailableEncryption(password)


def _public_der(public_key):
    return public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo)


class KeyStoreEntry(object):
    """A private key, encrypted with the entry password, and the certificate
    for its public half"""

    def __init__(self, alias, private_key, password, certificate):
        cert_pkey = _public_der(certificate.public_key())
        if cert_pkey != _public_der(private_key.public_key()):
            raise ValueError("Public key of certificate does not match the "
                             "private key for alias {!r}".format(alias))
        self.alias = alias
        self.certificate = certificate
        self._protected_key = private_key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=_protection(password))

    def key(self, password):
        password = _password_bytes(password) or None
        try:
            return serialization.load_der_private_key(self._protected_key,
                                                      password=password)
        except (TypeError, ValueError) as exc:
            raise AuthenticationError(
                "Wrong password for key store entry {!r}".format(self.alias)
            ) from exc

    @_reify
    def fingerprint(self):
        return self.certificate.fingerprint(hashes.SHA256()).hex()

    def __repr__(self):
        return ("<{0.__class__.__name__} alias={0.alias!r} "
                "sha256={0.fingerprint:8.8}...>").format(self)


class KeyStore(object):
    """In-memory key store mapping aliases to entries.

    The store password protects the store as a whole when it is dumped,
    each entry is protected by its own password."""

    def __init__(self, store_format=STORE_FORMAT, password=None):
        if str(store_format).upper() not in STORE_FORMATS:
            raise GenerationError(
                "Key store format {!r} is not available".format(store_format))
        self.store_format = store_format.upper()
        self._password = _password_bytes(password)
        self._entries = {}

    def __len__(self):
        return len(self._entries)

    def __contains__(self, alias):
        return alias in self._entries

    def __repr__(self):
        return "<{0.__class__.__name__} {0.store_format} aliases={1!r}>"\
            .format(self, self.aliases())

    def aliases(self):
        return sorted(self._entries)

    def entry(self, alias):
        try:
            return self._entries[alias]
        except KeyError:
            raise KeyError("No entry for alias {!r}".format(alias)) from None

    def set_entry(self, alias, private_key, password, certificate):
        self._entries[alias] = KeyStoreEntry(alias, private_key, password,
                                             certificate)
        LOG.debug("Stored key entry %r", alias)

    def get_key(self, alias, password):
        return self.entry(alias).key(password)

    def get_certificate(self, alias):
        return self.entry(alias).certificate

    def dump(self, alias=CERT_ALIAS, password=None):
        """Returns the entry under alias as a PKCS#12 bundle encrypted with
        the store password. password unlocks the entry itself."""
        key = self.get_key(alias, password)
        return pkcs12.serialize_key_and_certificates(
            name=alias.encode("utf8"),
            key=key,
            cert=self.get_certificate(alias),
            cas=None,
            encryption_algorithm=_protection(self._password))

    @classmethod
    def load(cls, data, password, store_format=STORE_FORMAT):
        """Rebuilds a store from a PKCS#12 bundle; password opens the bundle
        and protects the loaded entry."""
        try:
            bundle = pkcs12.load_pkcs12(data, _password_bytes(password) or None)
        except (TypeError, ValueError) as exc:
            raise AuthenticationError(
                "Cannot open key store, wrong password or corrupt data"
            ) from exc
        if bundle.key is None or bundle.cert is None:
            raise ValueError("Key store holds no key entry")

        alias = CERT_ALIAS
        if bundle.cert.friendly_name:
            alias = bundle.cert.friendly_name.decode("utf8")

        store = cls(store_format, password)
        store.set_entry(alias, bundle.key, password, bundle.cert.certificate)
        return store


def create_store(store_format=STORE_FORMAT, password=None):
    return KeyStore(store_format, password)


def set_entry(store, alias, private_key, password, certificate):
    store.set_entry(alias, private_key, password, certificate)


def get_key(store, alias, password):
    return store.get_key(alias, password)


def get_certificate(store, alias):
    return store.get_certificate(alias)
