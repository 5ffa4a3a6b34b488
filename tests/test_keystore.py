#! /usr/bin/env python
# vim: expandtab shiftwidth=4 softtabstop=4 tabstop=17 filetype=python :
"""tests.test_keystore contains the unittests for selfsign.keystore"""
import unittest

from selfsign import certlib, keystore
from selfsign.errors import (
    AuthenticationError,
    GenerationError,
)

from . import fixtures, KeyPairTestCase


class TestCreateStore(unittest.TestCase):

    def test_empty(self):
        store = keystore.create_store("PKCS12", fixtures.PASSWORD)
        self.assertEqual(0, len(store))
        self.assertEqual([], store.aliases())

    def test_format_case(self):
        store = keystore.create_store("pkcs12", fixtures.PASSWORD)
        self.assertEqual("PKCS12", store.store_format)

    def test_unavailable_format(self):
        for store_format in ("JKS", "JCEKS", ""):
            with self.subTest(store_format=store_format):
                with self.assertRaises(GenerationError):
                    keystore.create_store(store_format, fixtures.PASSWORD)


class TestKeyStore(KeyPairTestCase):

    def test_round_trip(self):
        store = self.make_store()
        key = keystore.get_key(store, certlib.CERT_ALIAS, fixtures.PASSWORD)
        self.assertSameKey(self.pair.private_key, key)
        cert = keystore.get_certificate(store, certlib.CERT_ALIAS)
        self.assertEqual(self.cert, cert)

    def test_single_entry(self):
        store = self.make_store()
        self.assertEqual(1, len(store))
        self.assertIn(certlib.CERT_ALIAS, store)
        self.assertEqual([certlib.CERT_ALIAS], store.aliases())

    def test_wrong_password(self):
        store = self.make_store()
        for password in (fixtures.WRONG_PASSWORD, "", None):
            with self.subTest(password=password):
                with self.assertRaises(AuthenticationError):
                    store.get_key(certlib.CERT_ALIAS, password)

    def test_bytes_password(self):
        store = self.make_store()
        key = store.get_key(certlib.CERT_ALIAS,
                            fixtures.PASSWORD.encode("utf8"))
        self.assertSameKey(self.pair.private_key, key)

    def test_empty_password(self):
        store = self.make_store(password="")
        key = store.get_key(certlib.CERT_ALIAS, "")
        self.assertSameKey(self.pair.private_key, key)
        with self.assertRaises(AuthenticationError):
            store.get_key(certlib.CERT_ALIAS, fixtures.PASSWORD)

    def test_unknown_alias(self):
        store = self.make_store()
        with self.assertRaises(KeyError):
            store.get_key("other", fixtures.PASSWORD)
        with self.assertRaises(KeyError):
            store.get_certificate("other")

    def test_mismatched_certificate(self):
        other = certlib.generate_key_pair(key_size=1024)
        store = keystore.create_store(password=fixtures.PASSWORD)
        with self.assertRaises(ValueError):
            keystore.set_entry(store, certlib.CERT_ALIAS, other.private_key,
                               fixtures.PASSWORD, self.cert)
        self.assertEqual(0, len(store))

    def test_several_aliases(self):
        other = certlib.generate_key_pair(key_size=1024)
        other_cert = certlib.build_self_signed_certificate(
            "CN=other", other, 1)
        store = self.make_store()
        store.set_entry("other", other.private_key, "secret", other_cert)
        self.assertEqual([certlib.CERT_ALIAS, "other"], store.aliases())
        self.assertSameKey(other.private_key, store.get_key("other", "secret"))
        with self.assertRaises(AuthenticationError):
            store.get_key("other", fixtures.PASSWORD)

    def test_replace_entry(self):
        store = self.make_store()
        store.set_entry(certlib.CERT_ALIAS, self.pair.private_key, "new",
                        self.cert)
        self.assertEqual(1, len(store))
        with self.assertRaises(AuthenticationError):
            store.get_key(certlib.CERT_ALIAS, fixtures.PASSWORD)

    def test_fingerprint(self):
        entry = self.make_store().entry(certlib.CERT_ALIAS)
        self.assertEqual(64, len(entry.fingerprint))
        self.assertIn(entry.fingerprint[:8], repr(entry))


class TestPKCS12(KeyPairTestCase):

    def test_round_trip(self):
        data = self.make_store().dump(certlib.CERT_ALIAS, fixtures.PASSWORD)
        store = keystore.KeyStore.load(data, fixtures.PASSWORD)
        self.assertEqual([certlib.CERT_ALIAS], store.aliases())
        self.assertEqual(self.cert, store.get_certificate(certlib.CERT_ALIAS))
        key = store.get_key(certlib.CERT_ALIAS, fixtures.PASSWORD)
        self.assertSameKey(self.pair.private_key, key)

    def test_wrong_password(self):
        data = self.make_store().dump(certlib.CERT_ALIAS, fixtures.PASSWORD)
        with self.assertRaises(AuthenticationError):
            keystore.KeyStore.load(data, fixtures.WRONG_PASSWORD)

    def test_dump_needs_entry_password(self):
        store = self.make_store()
        with self.assertRaises(AuthenticationError):
            store.dump(certlib.CERT_ALIAS, fixtures.WRONG_PASSWORD)

    def test_not_pkcs12(self):
        with self.assertRaises(AuthenticationError):
            keystore.KeyStore.load(b"not a key store", fixtures.PASSWORD)
