"""
Capability evaluation.

A capability granted to a user at a context holds for that context and
every context below it. Site administrators hold every capability.
"""

import logging
from ..models import DBSession
from ..models.user import User, CapabilityAssignment
from ..exceptions import AuthorizationError

log = logging.getLogger(__name__)

# Capabilities used across the booking module
CAP_SITE_CONFIG = 'moodle/site:config'
CAP_BOOK_FOR_OTHERS = 'mod/booking:bookforothers'
CAP_MANAGE_OPTION_TEMPLATES = 'mod/booking:manageoptiontemplates'
CAP_DASHBOARD_VIEW = 'local/berta:view'


class CapabilityService:

    def __init__(self, session=None):
        self.session = session or DBSession

    def has_capability(self, capability, context, user):
        if user is None:
            return False

        if isinstance(user, int):
            user = self.session.query(User).filter_by(id=user).first()
            if user is None:
                return False

        if not user.active:
            return False
        if user.is_siteadmin:
            return True

        granted = (
            self.session.query(CapabilityAssignment.id)
            .filter(
                CapabilityAssignment.userid == user.id,
                CapabilityAssignment.capability == capability,
                CapabilityAssignment.contextid.in_(context.ancestor_ids())
            )
            .first()
        )
        return granted is not None

    def require_capability(self, capability, context, user):
        if not self.has_capability(capability, context, user):
            log.warning(f"User {getattr(user, 'id', user)} lacks {capability} in context {context.id}")
            raise AuthorizationError(
                f'Missing capability {capability}',
                capability=capability,
                contextid=context.id
            )

    def assign(self, userid, capability, context):
        """Grant ``capability`` to a user at ``context``."""
        existing = (
            self.session.query(CapabilityAssignment)
            .filter_by(userid=userid, contextid=context.id, capability=capability)
            .first()
        )
        if existing:
            return existing

        assignment = CapabilityAssignment(userid=userid, contextid=context.id, capability=capability)
        self.session.add(assignment)
        self.session.flush()
        return assignment
