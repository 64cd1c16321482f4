import uuid

from sqlalchemy.orm import Session
from neocrm.models.profile import Profile


class ProfileRepository:
    """Repository for Profile model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: str) -> Profile | None:
        """Get profile by Supabase user id"""
        return self.db.query(Profile).filter(Profile.id == user_id).first()

    def get_by_email(self, email: str) -> Profile | None:
        return self.db.query(Profile).filter(Profile.email == email.lower()).first()

    def get_or_create_by_email(self, email: str, role: str) -> Profile:
        """
        Get profile by email or create a placeholder for an invited user.

        The placeholder keeps the invited role until the user signs up and
        Supabase links the auth account to it.

        Args:
            email: Invited email address
            role: Role recorded on a newly created profile

        Returns:
            Profile object (either existing or newly created)
        """
        profile = self.get_by_email(email)

        if not profile:
            profile = Profile(
                id=str(uuid.uuid4()),
                email=email.lower(),
                full_name=email.split("@")[0],
                role=role,
            )
            self.db.add(profile)
            self.db.commit()
            self.db.refresh(profile)

        return profile
