# pharmacy/services/user_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pharmacy.data.models.user import UserModel
from pharmacy.domain.errors import (
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from pharmacy.domain.schemas import (
    GoogleRegisterIn,
    ProfileUpdateIn,
    RegisterIn,
    UserOut,
)
from pharmacy.repos.user_repo import UserRepo
from pharmacy.services.google_client import GoogleIdentity
from pharmacy.services.security import PasswordHasher, get_password_hasher
from pharmacy.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    """
    Konta uzytkownikow: rejestracja, logowanie, profil, haslo, avatar
    oraz mostek tozsamosci Google.
    """

    def __init__(self, db: Session, hasher: PasswordHasher | None = None):
        self.repo = UserRepo(db)
        self.hasher = hasher or get_password_hasher()

    #query
    def ensure_exists(self, user_id: int) -> None:
        if not user_id:
            raise ValidationError("user_id jest wymagany")
        if not self.repo.exists(user_id):
            raise NotFoundError("Użytkownik nie znaleziony")

    def get_user(self, user_id: int) -> UserOut:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("Użytkownik nie znaleziony")
        return UserOut.model_validate(user)

    #commands
    def _insert(self, user: UserModel) -> UserModel:
        # rownolegle zadanie moglo zajac login/email po naszym sprawdzeniu
        try:
            return self.repo.create_user(user)
        except IntegrityError:
            self.repo.rollback()
            logger.info(f"Konflikt unikalnosci przy zakladaniu konta {user.username} ({user.email})")
            raise ConflictError("Użytkownik z takim loginem lub emailem już istnieje")

    def register(self, payload: RegisterIn) -> UserOut:
        existing = self.repo.find_by_username_or_email(payload.username, payload.email)
        if existing:
            raise ConflictError("Użytkownik z takim loginem lub emailem już istnieje")

        full_name = None
        if payload.first_name and payload.last_name:
            full_name = f"{payload.first_name} {payload.last_name}"

        user = UserModel(
            username=payload.username,
            email=payload.email,
            password=self.hasher.hash(payload.password),
            full_name=full_name,
            first_name=payload.first_name,
            last_name=payload.last_name,
            phone=payload.phone,
        )
        created = self._insert(user)
        logger.info(f"Zarejestrowano uzytkownika {created.id} ({created.username})")
        return UserOut.model_validate(created)

    def login(self, login: str, password: str) -> UserOut:
        user = self.repo.find_by_login(login)
        if not user or not self.hasher.verify(password, user.password):
            logger.info(f"Nieudane logowanie dla {login}")
            raise UnauthorizedError("Nieprawidłowy login lub hasło")

        fields = {}
        #stare sumy kontrolne podmieniamy na prawdziwy hash przy pierwszym logowaniu
        if self.hasher.needs_rehash(user.password):
            fields["password"] = self.hasher.hash(password)
            logger.info(f"Przehashowano haslo uzytkownika {user.id}")

        self.repo.register_login(user.id)
        if fields:
            self.repo.update_fields(user.id, **fields)
        self.repo.commit()

        return self.get_user(user.id)

    def update_profile(self, payload: ProfileUpdateIn) -> UserOut:
        self.ensure_exists(payload.user_id)
        self.repo.update_fields(
            payload.user_id,
            first_name=payload.first_name,
            last_name=payload.last_name,
            middle_name=payload.middle_name,
            phone=payload.phone,
        )
        self.repo.commit()
        logger.info(f"Zaktualizowano profil uzytkownika {payload.user_id}")
        return self.get_user(payload.user_id)

    def change_password(self, user_id: int, current_password: str, new_password: str) -> None:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("Użytkownik nie znaleziony")

        if not self.hasher.verify(current_password, user.password):
            raise ValidationError("Aktualne hasło jest nieprawidłowe")

        self.repo.update_fields(user_id, password=self.hasher.hash(new_password))
        self.repo.commit()
        logger.info(f"Zmieniono haslo uzytkownika {user_id}")

    def set_avatar(self, user_id: int, avatar: str) -> str:
        self.ensure_exists(user_id)
        self.repo.update_fields(user_id, avatar=avatar)
        self.repo.commit()
        return avatar

    # =====================================================
    # GOOGLE
    # =====================================================
    def _unique_username(self, email: str) -> str:
        base = email.split("@")[0] + "_google"
        candidate = base
        suffix = 1
        while self.repo.username_taken(candidate):
            suffix += 1
            candidate = f"{base}{suffix}"
        return candidate

    def google_sign_in(self, identity: GoogleIdentity) -> tuple[UserOut, bool]:
        """
        Zwraca (uzytkownik, czy_utworzony).
        Istniejace konto (po google_id albo emailu) liczy logowanie, brakujace jest zakladane.
        """
        user = self.repo.find_by_google(identity.sub, identity.email)

        if user:
            fields = {}
            if not user.google_id:
                fields["google_id"] = identity.sub
            if identity.email_verified and not user.email_verified:
                fields["email_verified"] = True
            self.repo.register_login(user.id)
            if fields:
                self.repo.update_fields(user.id, **fields)
            self.repo.commit()
            logger.info(f"Logowanie Google uzytkownika {user.id}")
            return self.get_user(user.id), False

        created = self._insert(
            UserModel(
                username=self._unique_username(identity.email),
                email=identity.email,
                password=self.hasher.unusable(),
                first_name=identity.given_name,
                last_name=identity.family_name,
                full_name=identity.name,
                avatar=identity.picture,
                google_id=identity.sub,
                email_verified=identity.email_verified,
                login_count=1,
            )
        )
        logger.info(f"Utworzono konto Google {created.id} dla {identity.email}")
        return UserOut.model_validate(created), True

    def google_register(self, payload: GoogleRegisterIn) -> UserOut:
        """Uzupelnienie danych konta Google (upsert)."""
        user = self.repo.find_by_google(payload.google_id, payload.email)

        if user:
            self.repo.update_fields(
                user.id,
                first_name=payload.first_name,
                last_name=payload.last_name,
                phone=payload.phone,
                avatar=payload.avatar,
                email_verified=payload.email_verified,
                google_id=payload.google_id,
            )
            self.repo.register_login(user.id)
            self.repo.commit()
            return self.get_user(user.id)

        created = self._insert(
            UserModel(
                username=self._unique_username(payload.email),
                email=payload.email,
                password=self.hasher.unusable(),
                first_name=payload.first_name,
                last_name=payload.last_name,
                phone=payload.phone,
                avatar=payload.avatar,
                google_id=payload.google_id,
                email_verified=payload.email_verified,
                login_count=1,
            )
        )
        logger.info(f"Zarejestrowano konto Google {created.id}")
        return UserOut.model_validate(created)
