#! /usr/bin/env python
# vim: expandtab shiftwidth=4 softtabstop=4 tabstop=17 filetype=python :
import shutil
import tempfile
import unittest

from selfsign import certlib
from selfsign.keystore import create_store

from . import fixtures


class KeyPairTestCase(unittest.TestCase):
    """Generates one key pair and certificate per class, RSA key
    generation is too slow to repeat for every test"""

    @classmethod
    def setUpClass(cls):
        super(KeyPairTestCase, cls).setUpClass()
        cls.pair = certlib.generate_key_pair()
        cls.cert = certlib.build_self_signed_certificate(
            certlib.DISTINGUISHED_NAME, cls.pair, fixtures.VALIDITY_DAYS)

    def make_store(self, password=fixtures.PASSWORD):
        store = create_store(password=password)
        store.set_entry(certlib.CERT_ALIAS, self.pair.private_key, password,
                        self.cert)
        return store

    def assertSameKey(self, a, b, msg=None):
        self.assertEqual(a.private_numbers(), b.private_numbers(), msg)


class TempDirTestCase(unittest.TestCase):
    def setUp(self):
        super(TempDirTestCase, self).setUp()
        self.tmpdir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.tmpdir)
