import pytest

from app.api.dependencies import require_admin, require_course_access, require_login
from app.core.exceptions import (
    ForbiddenException,
    MalformedResourceReferenceException,
    MissingCredentialException,
    NotEnrolledException,
    StorageUnavailableException,
)
from app.core.policy import (
    AccessContext,
    AccessPolicy,
    EnrollmentLookup,
    Guard,
    Principal,
    RequireAuthenticated,
    RequireEnrollment,
    RequireRole,
)
from app.models.user import UserRole
from app.services.enrollment_service import EnrollmentService


class FakeEnrollments:
    """Хранилище записей в памяти"""

    def __init__(self, pairs=(), fail=False):
        self.pairs = set(pairs)
        self.fail = fail
        self.calls = []

    def exists(self, user_id, course_id):
        self.calls.append((user_id, course_id))
        if self.fail:
            raise StorageUnavailableException()
        return (user_id, course_id) in self.pairs


class Recorder(Guard):
    def __init__(self, log):
        self.log = log

    def __call__(self, ctx):
        self.log.append("ran")


USER = Principal(user_id=1, role=UserRole.USER)
ADMIN = Principal(user_id=2, role=UserRole.ADMIN)


def ctx(principal, course_id="5", store=None):
    params = {} if course_id is None else {"course_id": course_id}
    return AccessContext(principal=principal, params=params, enrollments=store or FakeEnrollments())


def test_authenticated_guard_requires_principal():
    with pytest.raises(MissingCredentialException):
        AccessPolicy([RequireAuthenticated()]).enforce(ctx(None))
    assert AccessPolicy([RequireAuthenticated()]).enforce(ctx(USER)) is USER


def test_role_guard_rejects_other_roles():
    with pytest.raises(ForbiddenException) as exc_info:
        RequireRole(UserRole.ADMIN)(ctx(USER))
    assert exc_info.value.reason == "role_mismatch"
    RequireRole(UserRole.ADMIN)(ctx(ADMIN))


def test_enrolled_user_passes():
    store = FakeEnrollments(pairs=[(1, 5)])
    RequireEnrollment()(ctx(USER, store=store))
    assert store.calls == [(1, 5)]


def test_not_enrolled_user_is_rejected():
    with pytest.raises(NotEnrolledException) as exc_info:
        RequireEnrollment()(ctx(USER))
    assert exc_info.value.error_code == "forbidden"
    assert exc_info.value.reason == "not_enrolled"


@pytest.mark.parametrize("course_id", ["5", "999"])
def test_admin_bypasses_enrollment_without_lookup(course_id):
    store = FakeEnrollments()
    RequireEnrollment()(ctx(ADMIN, course_id=course_id, store=store))
    assert store.calls == []


@pytest.mark.parametrize("course_id", [None, "", "abc", "1.5", "1_0", "-3", "+3", "\u0665"])
@pytest.mark.parametrize("principal", [USER, ADMIN])
def test_unparseable_course_id_is_malformed_reference(principal, course_id):
    store = FakeEnrollments()
    with pytest.raises(MalformedResourceReferenceException):
        RequireEnrollment()(ctx(principal, course_id=course_id, store=store))
    assert store.calls == []


def test_storage_failure_is_not_reported_as_not_enrolled():
    with pytest.raises(StorageUnavailableException):
        RequireEnrollment()(ctx(USER, store=FakeEnrollments(fail=True)))


def test_enrollment_guard_reads_configured_param():
    store = FakeEnrollments(pairs=[(1, 9)])
    context = AccessContext(principal=USER, params={"id": "9"}, enrollments=store)
    RequireEnrollment("id")(context)


def test_first_failing_guard_short_circuits():
    log = []
    policy = AccessPolicy([RequireRole(UserRole.ADMIN), Recorder(log)])
    with pytest.raises(ForbiddenException):
        policy.enforce(ctx(USER))
    assert log == []


def test_guards_run_in_declared_order():
    store = FakeEnrollments()
    policy = AccessPolicy([RequireRole(UserRole.ADMIN), RequireEnrollment()])
    with pytest.raises(ForbiddenException) as exc_info:
        policy.enforce(ctx(USER, store=store))
    assert exc_info.value.reason == "role_mismatch"
    assert store.calls == []


def test_policy_returns_principal_when_all_guards_pass():
    log = []
    policy = AccessPolicy([RequireAuthenticated(), Recorder(log), RequireEnrollment()])
    assert policy.enforce(ctx(ADMIN)) is ADMIN
    assert log == ["ran"]


def test_route_dependencies_expose_guard_order():
    assert [type(g) for g in require_login.policy.guards] == [RequireAuthenticated]
    assert [type(g) for g in require_admin.policy.guards] == [RequireAuthenticated, RequireRole]
    assert require_admin.policy.guards[1].role == UserRole.ADMIN
    assert [type(g) for g in require_course_access.policy.guards] == [RequireAuthenticated, RequireEnrollment]


def test_underscored_course_id_does_not_reach_another_course():
    store = FakeEnrollments(pairs=[(1, 10)])
    with pytest.raises(MalformedResourceReferenceException):
        RequireEnrollment()(ctx(USER, course_id="1_0", store=store))
    assert store.calls == []


def test_padded_course_id_is_accepted():
    store = FakeEnrollments(pairs=[(1, 5)])
    RequireEnrollment()(ctx(USER, course_id=" 5 ", store=store))
    assert store.calls == [(1, 5)]


def test_enrollment_stores_satisfy_lookup_contract(db_session):
    assert isinstance(FakeEnrollments(), EnrollmentLookup)
    assert isinstance(EnrollmentService(db_session), EnrollmentLookup)
    assert not isinstance(object(), EnrollmentLookup)
