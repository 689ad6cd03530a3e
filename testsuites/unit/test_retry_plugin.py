"""Whole-test retry behaviour of the pytest plugin, run in isolated pytester sessions."""

import pytest

PLUGIN = "testsuites.ui_testing.framework.retry_plugin"


@pytest.fixture
def run(pytester):
    def _run(source, *args):
        pytester.makepyfile(source)
        return pytester.runpytest("-p", PLUGIN, "--retry-backoff=0", *args)

    return _run


def test_missing_element_failure_is_rerun_three_times(run):
    result = run(
        """
        def test_save():
            raise Exception("no such element: Unable to locate element: #save")
        """
    )

    result.assert_outcomes(failed=1)
    assert result.parseoutcomes()["rerun"] == 3


def test_driver_error_is_rerun_once(run):
    result = run(
        """
        class WebDriverException(Exception):
            pass

        def test_browser():
            raise WebDriverException("chrome not reachable")
        """
    )

    result.assert_outcomes(failed=1)
    assert result.parseoutcomes()["rerun"] == 1


def test_flaky_test_passes_on_retry(run):
    result = run(
        """
        CALLS = {"count": 0}

        def test_flaky():
            CALLS["count"] += 1
            if CALLS["count"] == 1:
                raise TimeoutError("timed out waiting for dashboard")
        """
    )

    result.assert_outcomes(passed=1)
    assert result.parseoutcomes()["rerun"] == 1


def test_non_retryable_failure_runs_once(run):
    result = run(
        """
        from testsuites.ui_testing.framework.exceptions import OptionNotFoundError

        def test_select():
            raise OptionNotFoundError("Option 'Atlantis' not found")
        """
    )

    result.assert_outcomes(failed=1)
    assert "rerun" not in result.parseoutcomes()


def test_no_retry_marker_and_option(run):
    source = """
        import pytest

        @pytest.mark.no_retry
        def test_marked():
            raise TimeoutError("timed out")

        def test_unmarked():
            raise TimeoutError("timed out")
        """
    result = run(source)
    result.assert_outcomes(failed=2)
    assert result.parseoutcomes()["rerun"] == 2

    result = run(source, "--no-test-retry")
    result.assert_outcomes(failed=2)
    assert "rerun" not in result.parseoutcomes()


def test_each_attempt_gets_fresh_function_fixtures(run):
    result = run(
        """
        import pytest

        CREATED = []

        @pytest.fixture
        def resource():
            CREATED.append(object())
            return CREATED[-1]

        def test_uses_resource(resource):
            assert len(set(map(id, CREATED))) == len(CREATED)
            if len(CREATED) < 3:
                raise Exception("stale element reference")
        """
    )

    result.assert_outcomes(passed=1)
    assert result.parseoutcomes()["rerun"] == 2


def test_skips_are_not_retried(run):
    result = run(
        """
        import pytest

        def test_skipped():
            pytest.skip("not today")
        """
    )

    result.assert_outcomes(skipped=1)
    assert "rerun" not in result.parseoutcomes()


def test_unit_marked_failure_runs_once(run, pytester):
    pytester.makeini("[pytest]\nmarkers =\n    unit: in-memory test\n")
    result = run(
        """
        import pytest

        @pytest.mark.unit
        def test_parser():
            raise TimeoutError("timed out")
        """
    )

    result.assert_outcomes(failed=1)
    assert "rerun" not in result.parseoutcomes()


def test_recovery_runs_on_live_session_before_each_retry(run, pytester, monkeypatch):
    monkeypatch.setenv("APP_BASE_URL", "http://portal.test/provider-groups")
    monkeypatch.setenv("RECOVERY_SCROLL_PAUSE", "0")
    monkeypatch.setenv("REPORTS_SCREENSHOTS_DIR", str(pytester.path / "shots"))

    result = run(
        """
        import pytest

        from testsuites.ui_testing.framework import scripts
        from testsuites.ui_testing.framework.exceptions import ElementNotFoundError
        from testsuites.ui_testing.framework.retry_plugin import SINK_KEY
        from testsuites.ui_testing.framework.session import SessionRegistry
        from testsuites.unit.fake_driver import PNG_BYTES, FakeDriver, RecordingSink

        DRIVERS = []


        def make_driver(config):
            DRIVERS.append(FakeDriver())
            return DRIVERS[-1]


        @pytest.fixture(scope="module", autouse=True)
        def recording_sink(pytestconfig):
            pytestconfig.stash[SINK_KEY] = RecordingSink()
            return pytestconfig.stash[SINK_KEY]


        @pytest.fixture
        def session(portal_config):
            registry = SessionRegistry(driver_factory=make_driver, browser_setup=lambda browser: None)
            live = registry.acquire(portal_config)
            yield live
            registry.release(live)


        def test_save_button(session):
            raise ElementNotFoundError("no such element: Unable to locate element: #save")


        def test_recovery_and_final_report(recording_sink):
            assert len(DRIVERS) == 4
            *retried, last = DRIVERS
            assert all(scripts.SCROLL_MID_PAGE in driver.scripts for driver in retried)
            assert scripts.SCROLL_MID_PAGE not in last.scripts
            assert all(driver.quit_called for driver in DRIVERS)

            status, message = recording_sink.outcomes[-1]
            assert status == "failed"
            assert "failed after 3 retries" in message
            assert "Category: ElementNotFound" in message
            assert "URL: http://portal.test/provider-groups" in message

            name, data = recording_sink.screenshots[-1]
            assert name.endswith("test_save_button_failure")
            assert data == PNG_BYTES
        """
    )

    result.assert_outcomes(failed=1, passed=1)
    assert result.parseoutcomes()["rerun"] == 3
    assert len(list((pytester.path / "shots").glob("*test_save_button_failure_*.png"))) == 1
