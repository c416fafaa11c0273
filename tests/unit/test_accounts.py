"""Unit tests for AccountService flows."""
from tracking import t

import pytest

from infrastructure.constants import MSG_EMAIL_TAKEN, MSG_USER_NOT_FOUND, MSG_WRONG_PASSWORD
from users import AccountService, UserManager

from tests.helpers import build_managers, make_reservation, make_settings


@pytest.fixture
def service(tmp_path):
    store, inventory, reservations = build_managers(tmp_path)
    inventory.add_item('Cones', 50, item_id='cones')
    settings = make_settings(tmp_path, SUPER_ADMIN_PASSWORD='boot-secret')
    return AccountService(UserManager(store), reservations, settings)


def _register(service, club='Lions', email=None, code='PIN1234'):
    t('tests.unit.test_accounts._register')
    result = service.register_club(
        f'{club} Admin', email or f'admin@{club.lower()}.pt', 'secret1', club, code
    )
    assert result.success, result.message
    return result.user


def test_register_club_creates_hashed_admin(service):
    t('tests.unit.test_accounts.test_register_club_creates_hashed_admin')
    admin = _register(service)

    assert admin.is_admin
    assert admin.id.startswith('admin-')
    assert admin.club_id
    assert admin.password_hash != 'secret1'
    assert service.register_club('X', 'ADMIN@lions.pt', 'secret1', 'Other', 'c').message == MSG_EMAIL_TAKEN


def test_register_rejects_short_password(service):
    t('tests.unit.test_accounts.test_register_rejects_short_password')
    result = service.register_club('Ana', 'ana@x.pt', '12345', 'Lions', 'PIN')

    assert result.success is False
    assert not service.users.email_exists('ana@x.pt')


def test_login_outcomes(service):
    t('tests.unit.test_accounts.test_login_outcomes')
    _register(service)

    assert service.login('admin@lions.pt', 'secret1').success is True
    assert service.login(' Admin@Lions.pt ', 'secret1').success is True
    assert service.login('admin@lions.pt', 'nope').message == MSG_WRONG_PASSWORD
    assert service.login('ghost@lions.pt', 'secret1').message == MSG_USER_NOT_FOUND


def test_recovery_round_trip(service):
    t('tests.unit.test_accounts.test_recovery_round_trip')
    _register(service, code='PIN1234')

    assert service.recover_password('admin@lions.pt', 'WRONG', 'newpass1') is False
    assert service.login('admin@lions.pt', 'secret1').success is True

    assert service.recover_password('admin@lions.pt', 'PIN1234', 'newpass1') is True
    assert service.login('admin@lions.pt', 'newpass1').success is True
    assert service.login('admin@lions.pt', 'secret1').success is False


def test_recovery_rejects_unknown_email_and_short_password(service):
    t('tests.unit.test_accounts.test_recovery_rejects_unknown_email_and_short_password')
    _register(service)

    assert service.recover_password('ghost@lions.pt', 'PIN1234', 'newpass1') is False
    assert service.recover_password('admin@lions.pt', 'PIN1234', 'abc') is False
    assert service.login('admin@lions.pt', 'secret1').success is True


def test_coach_inherits_admin_club(service):
    t('tests.unit.test_accounts.test_coach_inherits_admin_club')
    admin = _register(service)

    result, coach = service.add_coach(admin, 'Rui', 'rui@lions.pt', 'secret2', club_name='Tigers')

    assert result.success is True
    assert coach.club_name == 'Lions'
    assert coach.club_id == admin.club_id
    assert [c.id for c in service.list_club_coaches(admin)] == [coach.id]


def test_only_admins_add_coaches(service):
    t('tests.unit.test_accounts.test_only_admins_add_coaches')
    admin = _register(service)
    _, coach = service.add_coach(admin, 'Rui', 'rui@lions.pt', 'secret2')

    result, created = service.add_coach(coach, 'Eva', 'eva@lions.pt', 'secret3')

    assert result.success is False
    assert created is None


def test_forced_password_change(service):
    t('tests.unit.test_accounts.test_forced_password_change')
    admin = _register(service)
    _, coach = service.add_coach(admin, 'Rui', 'rui@lions.pt', 'temp123', must_change_password=True)

    login = service.login('rui@lions.pt', 'temp123')
    assert login.success is False
    assert login.must_change_password is True
    assert login.user.id == coach.id

    assert service.change_password(coach.id, '123').success is False
    assert service.change_password(coach.id, 'temp123').success is False

    changed = service.change_password(coach.id, 'fresh-pass')
    assert changed.success is True
    assert changed.user.must_change_password is False
    assert service.login('rui@lions.pt', 'fresh-pass').success is True


def test_super_admin_login(service):
    t('tests.unit.test_accounts.test_super_admin_login')
    result = service.login(' SportsTrack ', 'boot-secret')

    assert result.success is True
    assert result.user.is_super_admin
    assert service.login('sportstrack', 'wrong').success is False


def test_super_admin_disabled_without_password(tmp_path):
    t('tests.unit.test_accounts.test_super_admin_disabled_without_password')
    store, _, reservations = build_managers(tmp_path)
    service = AccountService(UserManager(store), reservations, make_settings(tmp_path))

    assert service.login('sportstrack', '').success is False
    assert service.login('sportstrack', 'umaia2025').success is False


def test_delete_club_cascades_only_to_that_club(service):
    t('tests.unit.test_accounts.test_delete_club_cascades_only_to_that_club')
    lions = _register(service, 'Lions')
    tigers = _register(service, 'Tigers')
    _, c1 = service.add_coach(lions, 'C1', 'c1@lions.pt', 'secret2')
    _, c2 = service.add_coach(lions, 'C2', 'c2@lions.pt', 'secret2')
    _, t1 = service.add_coach(tigers, 'T1', 't1@tigers.pt', 'secret2')

    for index, owner in enumerate((lions, c1, c2, tigers, t1)):
        booked = service.reservations.create(
            make_reservation(f'r{index}', [('cones', 1)], coach_id=owner.id)
        )
        assert booked.success

    result = service.delete_club(lions)

    assert result.success is True
    remaining_users = {u.id for u in service.users.get_all_users()}
    assert remaining_users == {tigers.id, t1.id}
    remaining_owners = {r.coach_id for r in service.reservations.list_reservations()}
    assert remaining_owners == {tigers.id, t1.id}


def test_list_clubs(service):
    t('tests.unit.test_accounts.test_list_clubs')
    lions = _register(service, 'Lions')
    _register(service, 'Tigers')
    service.add_coach(lions, 'C1', 'c1@lions.pt', 'secret2')

    clubs = {club.club_name: club.coach_count for club in service.list_clubs()}

    assert clubs == {'Lions': 1, 'Tigers': 0}


def test_delete_coach(service):
    t('tests.unit.test_accounts.test_delete_coach')
    admin = _register(service)
    _, coach = service.add_coach(admin, 'Rui', 'rui@lions.pt', 'secret2')

    assert service.delete_coach(coach.id).success is True
    assert service.delete_coach(coach.id).success is False
