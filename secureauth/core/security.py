"""
Modul keamanan terpusat untuk SecureAuth API.
Menangani password hashing (bcrypt) serta JWT issuance dan verification.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from passlib.context import CryptContext
from passlib.exc import PasswordValueError
from jose import jwt, JWTError, ExpiredSignatureError
from jose.exceptions import JWTClaimsError

from secureauth.core.config import Settings
from secureauth.core.exceptions import ConfigurationError, HashingFailure, TokenInvalid


Clock = Callable[[], datetime]

# Claims yang dikelola TokenService dan tidak boleh di-override caller
RESERVED_CLAIMS = frozenset({"sub", "iat", "nbf", "exp", "iss", "aud"})


def utc_now() -> datetime:
    """Current time dalam UTC."""
    return datetime.now(timezone.utc)


class CredentialHasher:
    """
    One-way password hashing dengan bcrypt.

    Digest yang dihasilkan self-describing (``$2b$<cost>$<salt><hash>``), jadi
    verify tidak butuh parameter lain. Salt di-generate ulang setiap hash.
    """

    def __init__(self, rounds: int = 12):
        """
        Initialize hasher.

        Args:
            rounds: bcrypt cost factor (4-31)
        """
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds
        )

    def hash(self, plaintext: str) -> str:
        """
        Hash password.

        Args:
            plaintext: Plain text password

        Returns:
            bcrypt digest

        Raises:
            HashingFailure: Jika komputasi hashing gagal
        """
        try:
            return self._context.hash(plaintext)
        except (ValueError, TypeError) as e:
            raise HashingFailure("Password hashing failed") from e

    def verify(self, plaintext: str, digest: str) -> bool:
        """
        Verifikasi password terhadap digest dengan perbandingan constant-time.

        Args:
            plaintext: Plain text password
            digest: Digest hasil hash()

        Returns:
            True jika cocok, False jika tidak

        Raises:
            HashingFailure: Jika digest malformed
        """
        if not isinstance(digest, str) or self._context.identify(digest) is None:
            raise HashingFailure("Stored digest is malformed")

        try:
            return self._context.verify(plaintext, digest)
        except PasswordValueError:
            # Secret yang tidak bisa diproses bcrypt (mis. NUL) tidak pernah cocok
            return False
        except (ValueError, TypeError) as e:
            raise HashingFailure("Stored digest is malformed") from e

    def dummy_verify(self) -> bool:
        """
        Jalankan verifikasi terhadap digest dummy.
        Dipakai saat account tidak ditemukan supaya waktu response setara dengan password salah.
        """
        return self._context.dummy_verify()


@dataclass(frozen=True)
class VerifiedToken:
    """Hasil verifikasi token yang valid."""
    subject: str
    claims: Dict[str, Any] = field(default_factory=dict)
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class TokenService:
    """
    Sign dan verify bearer tokens (JWT).

    Token tidak disimpan di server dan tidak bisa di-revoke; token berlaku sampai expires-at.
    """

    def __init__(
        self,
        secret_key: Optional[str],
        ttl: timedelta = timedelta(hours=1),
        issuer: str = "secureauth",
        audience: str = "secureauth-frontend",
        algorithm: str = "HS256",
        clock: Clock = utc_now
    ):
        """
        Initialize token service.

        Args:
            secret_key: Signing secret; None berarti belum dikonfigurasi
            ttl: Masa berlaku token
            issuer: Nilai claim iss
            audience: Nilai claim aud
            algorithm: Algoritma JWT
            clock: Sumber waktu untuk iat/exp
        """
        self._secret_key = secret_key
        self.ttl = ttl
        self.issuer = issuer
        self.audience = audience
        self.algorithm = algorithm
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, clock: Clock = utc_now) -> "TokenService":
        """Build TokenService dari application settings."""
        return cls(
            secret_key=settings.JWT_SECRET_KEY,
            ttl=settings.access_token_expire_timedelta,
            issuer=settings.JWT_ISSUER,
            audience=settings.JWT_AUDIENCE,
            algorithm=settings.JWT_ALGORITHM,
            clock=clock
        )

    @property
    def is_configured(self) -> bool:
        return bool(self._secret_key)

    def _require_secret(self) -> str:
        if not self._secret_key:
            raise ConfigurationError("JWT_SECRET_KEY is not set")
        return self._secret_key

    def issue(self, subject: str, claims: Optional[Dict[str, Any]] = None) -> str:
        """
        Membuat signed access token.

        Args:
            subject: Account identifier untuk claim sub
            claims: Auxiliary claims (name, email) - informational only

        Returns:
            Encoded JWT

        Raises:
            ConfigurationError: Jika signing secret belum di-set
        """
        secret = self._require_secret()
        issued_at = int(self._clock().timestamp())

        to_encode: Dict[str, Any] = {
            key: value
            for key, value in (claims or {}).items()
            if key not in RESERVED_CLAIMS
        }
        to_encode.update({
            "sub": str(subject),
            "iat": issued_at,
            "nbf": issued_at,
            "exp": issued_at + int(self.ttl.total_seconds()),
            "iss": self.issuer,
            "aud": self.audience,
        })

        return jwt.encode(to_encode, secret, algorithm=self.algorithm)

    def verify(self, token: str) -> VerifiedToken:
        """
        Decode dan validasi token.

        Args:
            token: Encoded JWT

        Returns:
            VerifiedToken dengan subject dan auxiliary claims

        Raises:
            TokenInvalid: Untuk encoding rusak, signature salah, expired,
                not-yet-valid, atau issuer/audience mismatch
            ConfigurationError: Jika signing secret belum di-set
        """
        secret = self._require_secret()

        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
                options={
                    "require_aud": True,
                    "require_iss": True,
                    "require_iat": True,
                    "require_exp": True,
                    "require_sub": True
                }
            )
        except ExpiredSignatureError as e:
            raise TokenInvalid("expired") from e
        except JWTClaimsError as e:
            raise TokenInvalid(f"claims: {e}") from e
        except JWTError as e:
            raise TokenInvalid(f"malformed or bad signature: {e}") from e

        # Token berlaku selama now berada di [nbf, exp)
        now = self._clock().timestamp()
        if now >= payload["exp"]:
            raise TokenInvalid("expired")
        if "nbf" in payload and now < payload["nbf"]:
            raise TokenInvalid("not yet valid")

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise TokenInvalid("missing subject")

        return VerifiedToken(
            subject=subject,
            claims={k: v for k, v in payload.items() if k not in RESERVED_CLAIMS},
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc) if "iat" in payload else None,
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc) if "exp" in payload else None
        )
