#! /usr/bin/env python3
# vim: expandtab shiftwidth=4 softtabstop=4 tabstop=17 filetype=python :
"""Key pair generation and self-signed X.509 certificate building."""

import collections
import datetime
import ipaddress
import logging
import random
import secrets

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID
from dateutil.relativedelta import relativedelta

from .errors import (
    GenerationError,
    NameFormatError,
    SigningError,
)

LOG = logging.getLogger(name="selfsign.certlib")

KEY_PAIR_ALGORITHM = "RSA"
KEY_SIZE = 2048
PUBLIC_EXPONENT = 65537

# Based on https://www.ietf.org/rfc/rfc1779.txt, all fields are optional.
DISTINGUISHED_NAME = "CN=localhost, L=Palo Alto, C=US"
NAME_ATTRIBUTES = {
    "CN": NameOID.COMMON_NAME,
    "L": NameOID.LOCALITY_NAME,
    "ST": NameOID.STATE_OR_PROVINCE_NAME,
    "O": NameOID.ORGANIZATION_NAME,
    "OU": NameOID.ORGANIZATIONAL_UNIT_NAME,
    "C": NameOID.COUNTRY_NAME,
    "STREET": NameOID.STREET_ADDRESS,
}
NAME_SEPARATORS = ",;"
RDN_SEPARATOR = "+"

SIGNATURE_ALGORITHM = "SHA256withRSA"
LEGACY_SIGNATURE_ALGORITHM = "SHA1withRSA"
SIGNATURE_HASH = {"SHA1withRSA": hashes.SHA1,
                  "SHA256withRSA": hashes.SHA256,
                  "SHA384withRSA": hashes.SHA384,
                  "SHA512withRSA": hashes.SHA512}

CERT_ALIAS = "cert"
SUBJECT_ALT_IP = "127.0.0.1"
VALIDITY = 999

# Serial numbers are positive and fit in 64 bits
SERIAL_LIMIT = 1 << 64

KeyPair = collections.namedtuple("KeyPair", ("public_key", "private_key"))


def secure_random(random_source=None):
    """Returns a cryptographically secure random generator, refusing the
    general purpose ones from the random module"""
    if random_source is None:
        return secrets.SystemRandom()
    if not isinstance(random_source, random.SystemRandom):
        raise GenerationError(
            "{!r} is not a cryptographically secure random source"
            .format(random_source))
    return random_source


def generate_key_pair(algorithm=KEY_PAIR_ALGORITHM, key_size=KEY_SIZE,
                      random_source=None):
    """Generates a fresh key pair.

    The key material comes from the OpenSSL CSPRNG; random_source is only
    checked for being usable as a secure source."""
    secure_random(random_source)
    if str(algorithm).upper() != KEY_PAIR_ALGORITHM:
        raise GenerationError(
            "Key pair algorithm {!r} is not available".format(algorithm))
    try:
        key = rsa.generate_private_key(public_exponent=PUBLIC_EXPONENT,
                                       key_size=key_size)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise GenerationError(
            "Cannot generate {} bit {} key pair".format(key_size, algorithm)
        ) from exc
    LOG.debug("Generated %d bit %s key pair", key_size, KEY_PAIR_ALGORITHM)
    return KeyPair(key.public_key(), key)


def _tokenize(dn):
    """Returns (char, literal) pairs. Escaped and quoted characters are
    literal; the quote characters themselves are kept as structural tokens"""
    tokens = []
    quoted = False
    chars = iter(dn)
    for char in chars:
        if char == "\\":
            char = next(chars, None)
            if char is None:
                raise NameFormatError("Trailing escape in {!r}".format(dn))
            tokens.append((char, True))
        elif char == '"':
            quoted = not quoted
            tokens.append((char, False))
        else:
            tokens.append((char, quoted))
    if quoted:
        raise NameFormatError("Unterminated quote in {!r}".format(dn))
    return tokens


def _split(tokens, separators):
    parts = [[]]
    for char, literal in tokens:
        if char in separators and not literal:
            parts.append([])
        else:
            parts[-1].append((char, literal))
    return parts


def _strip(tokens):
    """Drops surrounding whitespace that was neither escaped nor quoted"""
    start, end = 0, len(tokens)
    while start < end and not tokens[start][1] and tokens[start][0].isspace():
        start += 1
    while (end > start and not tokens[end - 1][1]
           and tokens[end - 1][0].isspace()):
        end -= 1
    return tokens[start:end]


def _text(tokens):
    return "".join(char for char, _ in tokens)


def _attribute(component, dn):
    try:
        index = component.index(("=", False))
    except ValueError:
        raise NameFormatError("Malformed component {!r} in {!r}"
                              .format(_text(component), dn)) from None
    key = _text(_strip(component[:index])).upper()
    value = _strip(component[index + 1:])
    if len(value) >= 2 and value[0] == value[-1] == ('"', False):
        value = value[1:-1]
    if ('"', False) in value:
        raise NameFormatError("Stray quote in {!r}".format(dn))
    value = _text(value)

    if not key or not value:
        raise NameFormatError("Malformed component {!r} in {!r}"
                              .format(_text(component), dn))
    if key not in NAME_ATTRIBUTES:
        raise NameFormatError(
            "Unsupported attribute {!r} in {!r}".format(key, dn))
    try:
        return x509.NameAttribute(NAME_ATTRIBUTES[key], value)
    except ValueError as exc:
        raise NameFormatError(
            "Invalid value for {}: {}".format(key, exc)) from exc


def parse_distinguished_name(dn):
    """Parses an RFC 1779 style name such as "CN=localhost, L=Palo Alto, C=US"

    The string lists the most significant component last, so the encoded
    sequence of names is the reverse of the string order. A "+" joins
    attributes into one multi-valued name."""
    if not dn or not dn.strip():
        raise NameFormatError("Empty distinguished name")

    rdns = []
    for rdn in _split(_tokenize(dn), NAME_SEPARATORS):
        attributes = [_attribute(component, dn)
                      for component in _split(rdn, RDN_SEPARATOR)]
        try:
            rdns.append(x509.RelativeDistinguishedName(attributes))
        except ValueError as exc:
            raise NameFormatError(
                "Invalid name {!r}: {}".format(_text(rdn), exc)) from exc
    return x509.Name(list(reversed(rdns)))


def validity_interval(validity_days, now=None):
    """Returns (not_before, not_after), whole seconds in UTC, validity_days
    calendar days apart"""
    if validity_days < 1:
        raise GenerationError(
            "Validity must be at least one day, got {}".format(validity_days))
    if now is None:
        now = datetime.datetime.now(tz=datetime.timezone.utc)
    not_before = now.replace(microsecond=0)
    return not_before, not_before + relativedelta(days=validity_days)


def random_serial_number(random_source=None):
    return secure_random(random_source).randrange(1, SERIAL_LIMIT)


def signature_hash(signature_algorithm):
    try:
        algorithm = SIGNATURE_HASH[signature_algorithm]
    except KeyError:
        raise SigningError("Unknown signature algorithm {!r}"
                           .format(signature_algorithm)) from None
    if signature_algorithm == LEGACY_SIGNATURE_ALGORITHM:
        LOG.warning("Signing with legacy algorithm %s", signature_algorithm)
    return algorithm()


def build_self_signed_certificate(distinguished_name, key_pair, validity_days,
                                  signature_algorithm=SIGNATURE_ALGORITHM,
                                  random_source=None):
    """Builds a v3 certificate for distinguished_name, issued by itself and
    signed with the private half of key_pair."""
    not_before, not_after = validity_interval(validity_days)
    serial = random_serial_number(random_source)
    owner = parse_distinguished_name(distinguished_name)
    algorithm = signature_hash(signature_algorithm)

    if not isinstance(key_pair.private_key, rsa.RSAPrivateKey):
        raise SigningError("{} needs an RSA key".format(signature_algorithm))

    subject_alt_name = x509.SubjectAlternativeName(
        [x509.IPAddress(ipaddress.ip_address(SUBJECT_ALT_IP))])

    builder = (
        x509.CertificateBuilder()
        .serial_number(serial)
        .subject_name(owner)
        .issuer_name(owner)
        .not_valid_before(not_before)
        .not_valid_after(not_after)
        .public_key(key_pair.public_key)
        .add_extension(subject_alt_name, critical=False)
    )
    try:
        cert = builder.sign(key_pair.private_key, algorithm)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        if signature_algorithm == LEGACY_SIGNATURE_ALGORITHM:
            raise SigningError(
                "Legacy signature algorithm {} is not available with this "
                "cryptography release".format(signature_algorithm)) from exc
        raise SigningError(
            "Cannot sign certificate with {}".format(signature_algorithm)
        ) from exc

    LOG.debug("Signed certificate %x for %s, valid until %s",
              serial, owner.rfc4514_string(), not_after.isoformat())
    return cert
