"""
Declarative endpoint tree for the Litmos API.

Each node pairs an immutable `ResourceDescriptor` with the `RequestService`
that executes its verbs. Navigation (`users.id("abc").courses`) only derives
new descriptors; nothing is mutated, so nodes can be shared freely between
concurrent calls.

Supported endpoints::

    /users                        get; post
      /details                    get
      /{userId}                   get; put
        /teams                    get
        /learningpaths            get; post
        /courses                  get; post
          /{courseId}             get
    /courses                      get
      /{courseId}                 get
        /users                    get
        /modules                  get
    /results
      /details                    get
      /modules/{moduleId}         post
    /teams                        get; post
      /{teamId}                   get; put
        /courses                  get; post
        /teams                    get; post
        /learningpaths            get; post
        /users                    get; post
    /learningpaths                get
      /{learningpathId}           get
        /courses                  get
        /users                    get
"""

from typing import Any, List, Mapping, Optional

from .domain import (
    DELETE,
    GET,
    POST,
    PUT,
    READ_CREATE,
    READ_ONLY,
    READ_UPDATE,
    CREATE_ONLY,
    ResourceDescriptor,
)
from .service import RequestService

# Response paths
USERS = ("Users", "User")
USER = ("User",)
COURSES = ("Courses", "Course")
COURSE = ("Course",)
TEAMS = ("Teams", "Team")
TEAM = ("Team",)
LEARNING_PATHS = ("LearningPaths", "LearningPath")
LEARNING_PATH = ("LearningPath",)
MODULES = ("Modules", "Module")


class Endpoint:
    """A resource descriptor bound to the service that executes its verbs."""

    def __init__(self, service: RequestService, descriptor: ResourceDescriptor):
        self._service = service
        self.descriptor = descriptor

    def __repr__(self):
        return f"<{self.__class__.__name__} /{self.descriptor.endpoint}>"

    def _child(self, segment, response_path, request_path=(), methods=READ_ONLY):
        return Endpoint(
            self._service,
            self.descriptor.child(segment, response_path, request_path, methods),
        )

    async def get(self, params: Optional[Mapping[str, Any]] = None) -> List[Any]:
        """Fetches every record at this endpoint, following pagination."""
        return await self._service.send_request(self.descriptor, GET, params=params)

    async def search(
        self, term: str, params: Optional[Mapping[str, Any]] = None
    ) -> List[Any]:
        """Fetches the records matching a free-text search term."""
        return await self.get({**(params or {}), "search": term})

    async def post(
        self, body: Any, params: Optional[Mapping[str, Any]] = None
    ) -> List[Any]:
        """Creates (or assigns) one or more records."""
        return await self._service.send_request(
            self.descriptor, POST, body=body, params=params
        )

    async def put(
        self, body: Any, params: Optional[Mapping[str, Any]] = None
    ) -> List[Any]:
        """Updates the record at this endpoint."""
        return await self._service.send_request(
            self.descriptor, PUT, body=body, params=params
        )

    async def delete(self, params: Optional[Mapping[str, Any]] = None) -> List[Any]:
        return await self._service.send_request(self.descriptor, DELETE, params=params)


# --- Users ---

class UserCoursesEndpoint(Endpoint):
    """Courses assigned to one user."""

    def id(self, course_id: str) -> Endpoint:
        """The user's progress on one course, including module results."""
        return self._child(course_id, COURSE)


class UserEndpoint(Endpoint):
    """
    A single user. GET accepts the Litmos ID or the username; PUT requires
    the Litmos ID.
    """

    @property
    def teams(self) -> Endpoint:
        # Users are added to teams from the team side
        return self._child("teams", TEAMS)

    @property
    def learningpaths(self) -> Endpoint:
        return self._child("learningpaths", LEARNING_PATHS, LEARNING_PATHS, READ_CREATE)

    @property
    def courses(self) -> UserCoursesEndpoint:
        return UserCoursesEndpoint(
            self._service,
            self.descriptor.child("courses", COURSES, COURSES, READ_CREATE),
        )


class UsersEndpoint(Endpoint):
    """Entry point for the /users tree."""

    def __init__(self, service: RequestService):
        super().__init__(
            service, ResourceDescriptor(("users",), USERS, USER, READ_CREATE)
        )

    @property
    def details(self) -> Endpoint:
        """Bulk user details. Large accounts return a lot of data here."""
        return self._child("details", USERS)

    def id(self, user_id: str) -> UserEndpoint:
        return UserEndpoint(
            self._service, self.descriptor.child(user_id, USER, USER, READ_UPDATE)
        )


# --- Courses ---

class CourseEndpoint(Endpoint):
    @property
    def users(self) -> Endpoint:
        return self._child("users", USERS)

    @property
    def modules(self) -> Endpoint:
        return self._child("modules", MODULES)


class CoursesEndpoint(Endpoint):
    """Entry point for the read-only /courses tree."""

    def __init__(self, service: RequestService):
        super().__init__(service, ResourceDescriptor(("courses",), COURSES))

    def id(self, course_id: str) -> CourseEndpoint:
        return CourseEndpoint(self._service, self.descriptor.child(course_id, COURSE))


# --- Results ---

class ModuleResultsEndpoint(Endpoint):
    def id(self, module_id: str) -> Endpoint:
        """Posts completion results for one module."""
        return self._child(module_id, (), ("ModuleResult",), CREATE_ONLY)


class ResultsEndpoint(Endpoint):
    """Entry point for the /results tree. The root itself has no verbs."""

    def __init__(self, service: RequestService):
        super().__init__(service, ResourceDescriptor(("results",), methods=frozenset()))

    @property
    def details(self) -> Endpoint:
        """
        Historic results. Litmos requires a `since` query parameter and the
        call can take a long time to resolve.
        """
        return self._child("details", USERS)

    @property
    def modules(self) -> ModuleResultsEndpoint:
        return ModuleResultsEndpoint(
            self._service, self.descriptor.child("modules", (), methods=frozenset())
        )


# --- Teams ---

class TeamEndpoint(Endpoint):
    @property
    def courses(self) -> Endpoint:
        return self._child("courses", COURSES, COURSES, READ_CREATE)

    @property
    def teams(self) -> Endpoint:
        """Sub-teams of this team."""
        return self._child("teams", TEAMS, TEAM, READ_CREATE)

    @property
    def learningpaths(self) -> Endpoint:
        return self._child("learningpaths", LEARNING_PATHS, LEARNING_PATHS, READ_CREATE)

    @property
    def users(self) -> Endpoint:
        return self._child("users", USERS, USERS, READ_CREATE)


class TeamsEndpoint(Endpoint):
    """Entry point for the /teams tree."""

    def __init__(self, service: RequestService):
        super().__init__(
            service, ResourceDescriptor(("teams",), TEAMS, TEAM, READ_CREATE)
        )

    def id(self, team_id: str) -> TeamEndpoint:
        return TeamEndpoint(
            self._service, self.descriptor.child(team_id, TEAM, TEAM, READ_UPDATE)
        )


# --- Learning paths ---

class LearningPathEndpoint(Endpoint):
    @property
    def courses(self) -> Endpoint:
        return self._child("courses", COURSES)

    @property
    def users(self) -> Endpoint:
        return self._child("users", USERS)


class LearningPathsEndpoint(Endpoint):
    """Entry point for the read-only /learningpaths tree."""

    def __init__(self, service: RequestService):
        super().__init__(
            service, ResourceDescriptor(("learningpaths",), LEARNING_PATHS)
        )

    def id(self, learningpath_id: str) -> LearningPathEndpoint:
        return LearningPathEndpoint(
            self._service, self.descriptor.child(learningpath_id, LEARNING_PATH)
        )
