from setuptools import setup, find_packages

requires = [
    "pyramid",
    "plaster",
    "plaster_pastedeploy",
    "cryptography >= 42",
    "pyOpenSSL >= 23.0.0",
    "python-dateutil",
    # Transient dependency from pyramid->webob,
    # should be fixed in a later release of webob
    "legacy-cgi; python_version >= '3.13'"
]

deplinks = []

setup(
    name="selfsign",
    version="1.0.0",
    python_requires=">=3.8",
    description="selfsign",
    long_description="""
Selfsign bootstraps TLS trust material locally. It generates an RSA key pair
and a self-signed X.509 certificate for a distinguished name, keeps them in a
password protected key store under a fixed alias, and exports them as a PEM
document (private key first, then certificate) readable by the owner only, or
as a PKCS#12 bundle.

The certificate carries no externally verifiable trust. It is meant for
development and intra-process encryption where no third party needs to vouch
for the identity, never for public facing services.
      """,
    classifiers=[
        "Programming Language :: Python",
        "Topic :: Security :: Cryptography",
    ],
    keywords="certificates x509 self-signed keystore pem pkcs12 ssl tls",
    packages=find_packages(exclude=["tests"]),
    include_package_data=True,
    zip_safe=False,
    test_suite="tests",
    install_requires=requires,
    dependency_links=deplinks,
    entry_points="""\
      [console_scripts]
      selfsign_generate = selfsign.scripts.generate:main
      """,
)
