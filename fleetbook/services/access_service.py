from flask import current_app

from fleetbook.errors import AccessDeniedError, UnauthorizedError, ValidationError
from fleetbook.extensions import db
from fleetbook.models import Account, UserRole
from fleetbook.models.base import now_ns
from fleetbook.services.parsing import parse_text
from fleetbook.services.query_cache import QueryCache, user_profile_key, user_role_key

ROLE_RANK = {
    UserRole.GUEST: 0,
    UserRole.USER: 1,
    UserRole.ADMIN: 2,
}

OPERATION_MIN_ROLE = {
    "create_booking": UserRole.USER,
    "update_booking": UserRole.USER,
    "cancel_booking": UserRole.USER,
    "get_booking": UserRole.USER,
    "get_user_bookings": UserRole.USER,
    "complete_booking": UserRole.ADMIN,
    "get_all_bookings": UserRole.ADMIN,
    "add_vehicle": UserRole.ADMIN,
    "delete_vehicle": UserRole.ADMIN,
    "update_vehicle": UserRole.ADMIN,
    "set_vehicle_availability": UserRole.ADMIN,
    "update_vehicle_location": UserRole.ADMIN,
    "assign_user_role": UserRole.ADMIN,
    "get_available_vehicles": UserRole.USER,
    "get_all_vehicles": UserRole.USER,
    "get_vehicle": UserRole.USER,
    "get_caller_user_role": UserRole.GUEST,
    "is_caller_admin": UserRole.GUEST,
    "get_caller_profile": UserRole.USER,
    "save_caller_profile": UserRole.USER,
    "get_user_profile": UserRole.USER,
}


class AccessService:
    @staticmethod
    def role_for(account):
        if account is None or not getattr(account, "is_authenticated", False):
            return UserRole.GUEST
        return UserRole.parse(account.role, "role")

    @staticmethod
    def role_for_principal(principal):
        if not principal:
            return UserRole.GUEST
        account = Account.query.filter_by(principal=principal).first()
        if account:
            return UserRole.parse(account.role, "role")
        return AccessService._initial_role(principal)

    @staticmethod
    def is_admin(account):
        return AccessService.role_for(account) == UserRole.ADMIN

    @staticmethod
    def authorize(account, operation):
        required = OPERATION_MIN_ROLE[operation]
        role = AccessService.role_for(account)
        if ROLE_RANK[role] >= ROLE_RANK[required]:
            return role
        if required != UserRole.GUEST and not getattr(account, "is_authenticated", False):
            raise UnauthorizedError("Sign in required.")
        raise AccessDeniedError(f"This action requires the {required.value} role.")

    @staticmethod
    def ensure_owner_or_admin(account, booking):
        if booking.account_id == account.id or AccessService.is_admin(account):
            return
        raise AccessDeniedError("Not authorized for this booking.")

    @staticmethod
    def _initial_role(principal):
        if principal in current_app.config.get("ADMIN_PRINCIPALS", set()):
            return UserRole.ADMIN
        return UserRole.parse(current_app.config.get("DEFAULT_PRINCIPAL_ROLE", "user"), "default role")

    @staticmethod
    def load_or_register(principal, touch=False):
        """Return the account for an authenticated principal, registering it on first sight."""
        principal = (principal or "").strip()
        if not principal:
            return None

        account = Account.query.filter_by(principal=principal).first()
        changed = promoted = False
        if not account:
            account = Account(principal=principal, role=AccessService._initial_role(principal).value)
            db.session.add(account)
            changed = True
            current_app.logger.info("Registered principal %s as %s", principal, account.role)
        elif principal in current_app.config.get("ADMIN_PRINCIPALS", set()) and account.role != UserRole.ADMIN.value:
            account.role = UserRole.ADMIN.value
            changed = True
            promoted = True

        if touch:
            account.last_seen_at = now_ns()
            changed = True
        if changed:
            db.session.commit()
        if promoted:
            QueryCache.invalidate(user_role_key(principal), user_profile_key(principal))
            current_app.logger.info("Promoted %s to admin from ADMIN_PRINCIPALS", principal)
        return account

    @staticmethod
    def assign_role(principal, role):
        principal = (principal or "").strip()
        if not principal:
            raise ValidationError("Principal is required.")
        parsed = UserRole.parse(role, "role")

        account = Account.query.filter_by(principal=principal).first()
        if not account:
            account = Account(principal=principal, role=parsed.value)
            db.session.add(account)
        else:
            account.role = parsed.value
        db.session.commit()
        current_app.logger.info("Role of %s set to %s", principal, parsed.value)
        return account

    @staticmethod
    def profile_of(account):
        if account is None or not account.name:
            return None
        return {"name": account.name, "title": account.title or ""}

    @staticmethod
    def save_profile(account, name, title=None):
        if name is None:
            raise ValidationError("Profile name is required.")
        clean_name = parse_text(name, "Profile name", max_length=120)
        if not clean_name:
            raise ValidationError("Profile name is required.")
        clean_title = parse_text(title, "Profile title", max_length=120) if title is not None else account.title
        account.name = clean_name
        account.title = clean_title or None
        db.session.commit()
        current_app.logger.info("Profile saved for %s", account.principal)
        return account

    @staticmethod
    def ensure_can_view_profile(account, principal):
        if account.principal != principal and not AccessService.is_admin(account):
            raise AccessDeniedError("Only admins can view other profiles.")

    @staticmethod
    def profile_for_principal(principal):
        return AccessService.profile_of(Account.query.filter_by(principal=principal).first())
