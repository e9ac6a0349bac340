"""
Context (permission scope) lookups and creation.

Contexts form a tree with a materialised path: the system context is '/1',
a category below it '/1/3', a module inside a course '/1/3/9/15'.
"""

import logging
from ..models import DBSession
from ..models.context import Context, CONTEXT_SYSTEM
from ..exceptions import ResourceNotFoundError

log = logging.getLogger(__name__)


class ContextService:

    def __init__(self, session=None):
        self.session = session or DBSession

    def instance_by_id(self, contextid):
        context = self.session.query(Context).filter_by(id=contextid).first()
        if not context:
            raise ResourceNotFoundError(
                f'Context {contextid} does not exist',
                resource_type='context',
                resource_id=contextid
            )
        return context

    def system(self):
        """Return the system context, the root of every path."""
        context = self.session.query(Context).filter_by(contextlevel=CONTEXT_SYSTEM).first()
        if not context:
            raise ResourceNotFoundError('System context is missing', resource_type='context')
        return context

    def instance(self, contextlevel, instanceid):
        context = (
            self.session.query(Context)
            .filter_by(contextlevel=contextlevel, instanceid=instanceid)
            .first()
        )
        if not context:
            raise ResourceNotFoundError(
                f'No context of level {contextlevel} for instance {instanceid}',
                resource_type='context',
                resource_id=instanceid
            )
        return context

    def create(self, contextlevel, instanceid, parent=None):
        """Insert a context below ``parent`` and derive its path and depth."""
        context = Context(contextlevel=contextlevel, instanceid=instanceid)
        self.session.add(context)
        # The id is part of the path
        self.session.flush()

        if parent is None:
            context.path = f'/{context.id}'
            context.depth = 1
        else:
            context.path = f'{parent.path}/{context.id}'
            context.depth = parent.depth + 1

        log.debug(f"Created context {context.id} at {context.path}")
        return context
