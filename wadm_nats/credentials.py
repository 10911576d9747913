"""
Credential Resolution

Turns raw user input (inline seed/JWT values or paths to files holding them)
into the authentication material used to connect to NATS.

Three mutually exclusive auth modes are supported:
- Anonymous: no credentials at all
- SeedAndJwt: an nkey seed plus a user JWT, answered through nonce signing
- CredentialsFile: a .creds file handed as-is to the transport
"""

import asyncio
import base64
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import nkeys

from wadm_nats.errors import CredentialError

logger = logging.getLogger(__name__)

# Length of an encoded nkey seed
SEED_LENGTH = 58
SEED_PREFIX = "S"


def _read_file(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def make_signature_cb(key_pair: nkeys.KeyPair) -> Callable[[str], bytes]:
    """Build the nonce signing callback for a key pair

    The callback keeps a shared reference to ``key_pair`` and is invoked by
    the transport on every handshake, reconnects included, possibly from
    several in-flight handshakes at once.

    Args:
        key_pair: Signing key derived from the seed

    Returns:
        Callable: Takes the server nonce and returns the base64 signature
    """
    def signature_cb(nonce: str) -> bytes:
        raw_signed = key_pair.sign(nonce.encode())
        return base64.b64encode(raw_signed)

    return signature_cb


@dataclass(frozen=True)
class Anonymous:
    """No authentication"""

    def connect_options(self) -> Dict[str, Any]:
        return {}


@dataclass(frozen=True)
class SeedAndJwt:
    """User JWT plus the nkey used to sign server nonces"""
    signing_key: nkeys.KeyPair
    jwt: str

    def connect_options(self) -> Dict[str, Any]:
        """Options for ``nats.connect`` using the JWT and nonce signing callbacks"""
        jwt = self.jwt.strip().encode()

        def user_jwt_cb() -> bytes:
            return jwt

        return {
            "user_jwt_cb": user_jwt_cb,
            "signature_cb": make_signature_cb(self.signing_key),
        }


@dataclass(frozen=True)
class CredentialsFile:
    """Path to a .creds file, parsed by the transport at connect time"""
    path: Path

    def connect_options(self) -> Dict[str, Any]:
        return {"user_credentials": str(self.path)}


AuthMode = Union[Anonymous, SeedAndJwt, CredentialsFile]


async def resolve_seed(seed: str) -> nkeys.KeyPair:
    """Load a signing key from a raw seed or from a file containing one

    Args:
        seed: Either the seed itself (58 characters starting with ``S``) or
            a path to a file holding the seed

    Returns:
        nkeys.KeyPair: The parsed signing key

    Raises:
        CredentialError: If the file cannot be read or the seed is malformed
    """
    if len(seed) == SEED_LENGTH and seed.startswith(SEED_PREFIX):
        raw_seed = seed
        source = "inline value"
    else:
        try:
            raw_seed = await asyncio.to_thread(_read_file, seed)
        except (OSError, UnicodeDecodeError) as e:
            raise CredentialError(f"Error loading seed from file {seed}: {e}") from e
        source = f"file {seed}"
        logger.debug(f"Loaded nkey seed from {source}")

    try:
        return nkeys.from_seed(bytearray(raw_seed.strip().encode()))
    except (nkeys.NkeysError, ValueError) as e:
        raise CredentialError(f"Invalid nkey seed in {source}: {e!r}") from e


async def resolve_jwt(jwt: str) -> str:
    """Resolve a JWT that is either given inline or stored in a file

    If ``jwt`` names an existing regular file its contents are returned,
    otherwise the value is returned unchanged. The JWT itself is not
    validated; a bad token is rejected by the server when connecting.

    Raises:
        CredentialError: If the file exists but cannot be read
    """
    if not await asyncio.to_thread(os.path.isfile, jwt):
        return jwt

    try:
        contents = await asyncio.to_thread(_read_file, jwt)
    except (OSError, UnicodeDecodeError) as e:
        raise CredentialError(f"Error loading JWT from file {jwt}: {e}") from e
    logger.debug(f"Loaded JWT from file {jwt}")
    return contents


async def build_auth(seed: Optional[str] = None,
                     jwt: Optional[str] = None,
                     creds_path: Optional[Union[str, Path]] = None) -> AuthMode:
    """Build the auth mode for a set of raw credential inputs

    Exactly two combinations are accepted: a seed together with a JWT, or a
    credentials file on its own.

    Args:
        seed: Raw seed or path to a seed file
        jwt: Raw JWT or path to a JWT file
        creds_path: Path to a NATS .creds file

    Returns:
        AuthMode: ``SeedAndJwt`` or ``CredentialsFile``

    Raises:
        CredentialError: On any other combination, or if resolving fails
    """
    if seed is not None and jwt is not None and creds_path is None:
        resolved_jwt = await resolve_jwt(jwt)
        key_pair = await resolve_seed(seed)
        return SeedAndJwt(signing_key=key_pair, jwt=resolved_jwt)

    if seed is None and jwt is None and creds_path is not None:
        return CredentialsFile(path=Path(creds_path))

    given = [name for name, value in (("seed", seed), ("jwt", jwt), ("creds_path", creds_path))
             if value is not None]
    raise CredentialError(
        f"invalid combination of credentials (got: {', '.join(given) or 'none'}). "
        "Provide a seed and jwt, or a creds path"
    )
