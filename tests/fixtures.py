#! /usr/bin/env python
# vim: expandtab shiftwidth=4 softtabstop=4 tabstop=17 filetype=python :

from cryptography.x509.oid import NameOID

PASSWORD = "changeit"
WRONG_PASSWORD = "letmein"
VALIDITY_DAYS = 365

# (distinguished name, expected attributes in encoded order)
GOOD_NAMES = (
    ("CN=localhost, L=Palo Alto, C=US",
     ((NameOID.COUNTRY_NAME, "US"),
      (NameOID.LOCALITY_NAME, "Palo Alto"),
      (NameOID.COMMON_NAME, "localhost"))),
    ("CN=localhost",
     ((NameOID.COMMON_NAME, "localhost"),)),
    ("cn=box1;ou=Tooling;o=Acme AB;st=Östergötland;c=SE",
     ((NameOID.COUNTRY_NAME, "SE"),
      (NameOID.STATE_OR_PROVINCE_NAME, "Östergötland"),
      (NameOID.ORGANIZATION_NAME, "Acme AB"),
      (NameOID.ORGANIZATIONAL_UNIT_NAME, "Tooling"),
      (NameOID.COMMON_NAME, "box1"))),
    ('CN=web, O="Acme, Inc.", STREET=1 Main St',
     ((NameOID.STREET_ADDRESS, "1 Main St"),
      (NameOID.ORGANIZATION_NAME, "Acme, Inc."),
      (NameOID.COMMON_NAME, "web"))),
    ("CN=a\\, b\\=c ,  L = Linköping",
     ((NameOID.LOCALITY_NAME, "Linköping"),
      (NameOID.COMMON_NAME, "a, b=c"))),
    ("CN=a\\ , C=US",
     ((NameOID.COUNTRY_NAME, "US"),
      (NameOID.COMMON_NAME, "a "))),
    ('CN=" padded ", C=US',
     ((NameOID.COUNTRY_NAME, "US"),
      (NameOID.COMMON_NAME, " padded "))),
)

# (distinguished name, expected {(oid, value)} per name in encoded order)
MULTI_VALUED_NAMES = (
    ("CN=a+O=b, C=US",
     ({(NameOID.COUNTRY_NAME, "US")},
      {(NameOID.COMMON_NAME, "a"), (NameOID.ORGANIZATION_NAME, "b")})),
    ("CN=web + OU=Ops;O=Acme",
     ({(NameOID.ORGANIZATION_NAME, "Acme")},
      {(NameOID.COMMON_NAME, "web"),
       (NameOID.ORGANIZATIONAL_UNIT_NAME, "Ops")})),
    ('CN="a+b", C=US',
     ({(NameOID.COUNTRY_NAME, "US")},
      {(NameOID.COMMON_NAME, "a+b")})),
)

BAD_NAMES = (
    "",
    "   ",
    "localhost",
    "=localhost",
    "CN=",
    "CN=localhost,,C=US",
    "CN=localhost, C=US,",
    "XX=localhost",
    "EMAIL=root@localhost",
    "C=USA",
    'CN="unterminated',
    'CN=stray"quote"s',
    "CN=trailing\\",
    "CN=a+CN=a",
    "CN=a+",
    "+CN=a",
)
