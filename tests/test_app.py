"""Tests for the link orchestrator, with git faked out."""

import pytest

from git_permalink_maker import generate_range_link, global_prefs
from git_permalink_maker.app import PermalinkApp
from git_permalink_maker.selection import Selection

from .conftest import HEAD


class Recorder:
    """Collects actions and diagnostics."""

    def __init__(self):
        self.urls = []
        self.messages = []

    def action(self, url):
        self.urls.append(url)

    def notify(self, level, message):
        self.messages.append((level, message))

    @property
    def errors(self):
        return [message for level, message in self.messages if level == "error"]

    @property
    def warnings(self):
        return [message for level, message in self.messages if level == "warning"]


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def repo(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.py").write_text("print('hi')\n")
    return tmp_path


def make_app(recorder, factory, **prefs):
    app = PermalinkApp(
        global_prefs.current().merged(action=recorder.action, **prefs),
        git_factory=factory,
        notify=recorder.notify,
    )
    return app


class TestRangeLink:
    def test_point_mode_with_line(self, repo, recorder, fake_git_factory):
        app = make_app(recorder, fake_git_factory(toplevel=str(repo)))

        url = app.generate_range_link(Selection(str(repo / "src" / "app.py"), cursor_line=12))

        expected = f"https://github.com/owner/repo/blob/{HEAD}/src/app.py#L12"
        assert url == expected
        assert recorder.urls == [expected]
        assert recorder.messages == []

    def test_point_mode_without_line_in_point_mode(self, repo, recorder, fake_git_factory):
        factory = fake_git_factory(toplevel=str(repo), diffs={"src/app.py": "+changed\n"})
        app = make_app(recorder, factory, include_line_in_point_mode=False)

        url = app.generate_range_link(Selection(str(repo / "src" / "app.py"), cursor_line=12))

        assert url == f"https://github.com/owner/repo/blob/{HEAD}/src/app.py"
        # No anchor, so no uncommitted-changes check
        assert recorder.warnings == []
        assert not any(args[0] == "diff" for args in factory.history)

    def test_range_mode_orders_lines(self, repo, recorder, fake_git_factory):
        factory = fake_git_factory(
            toplevel=str(repo),
            remotes={"origin": "https://gitlab.com/group/sub/proj.git"},
        )
        app = make_app(recorder, factory)

        url = app.generate_range_link(
            Selection(str(repo / "src" / "app.py"), mode="range", anchor_line=30, cursor_line=4)
        )

        assert url == f"https://gitlab.com/group/sub/proj/-/blob/{HEAD}/src/app.py#L4-30"

    def test_overrides_apply_to_one_call(self, repo, recorder, fake_git_factory):
        factory = fake_git_factory(
            toplevel=str(repo),
            remotes={"origin": "git@github.com:o/r.git", "fork": "git@git.corp.example:me/r.git"},
            containing=["fork/main"],
        )
        app = make_app(recorder, factory)
        selection = Selection(str(repo / "src" / "app.py"), cursor_line=1)

        url = app.generate_range_link(selection, {"forced_remote": "fork", "hosts": {r"corp": "gitea"}})

        assert url == f"https://git.corp.example/me/r/src/commit/{HEAD}/src/app.py#L1"
        assert app.prefs.forced_remote is None

    def test_warnings_do_not_block(self, repo, recorder, fake_git_factory):
        factory = fake_git_factory(toplevel=str(repo), containing=[], diffs={"src/app.py": "+x\n"})
        app = make_app(recorder, factory)

        url = app.generate_range_link(Selection(str(repo / "src" / "app.py"), cursor_line=2))

        assert url is not None
        assert recorder.urls == [url]
        assert recorder.warnings == [
            "Commit not in remote 'origin' - push changes first",
            "'src/app.py' has uncommitted changes - line numbers may be wrong",
        ]

    @pytest.mark.parametrize(
        "factory_kwargs, error",
        [
            (dict(remotes={}), "No git remote found"),
            (dict(remotes={"origin": "somewhere:else"}), "Failed to parse remote URL: somewhere:else"),
            (dict(head=None), "Failed to get commit hash"),
            (dict(files=()), "'src/app.py' not in remote 'origin'"),
            (dict(remotes={"origin": "git@git.example.org:o/r.git"}), "No URL generator for host: git.example.org"),
        ],
    )
    def test_failures_are_reported_once(self, repo, recorder, fake_git_factory, factory_kwargs, error):
        app = make_app(recorder, fake_git_factory(toplevel=str(repo), **factory_kwargs))

        url = app.generate_range_link(Selection(str(repo / "src" / "app.py"), cursor_line=1))

        assert url is None
        assert recorder.urls == []
        assert recorder.errors == [error]

    def test_no_file(self, recorder, fake_git_factory):
        factory = fake_git_factory()
        app = make_app(recorder, factory)

        assert app.generate_range_link(Selection("")) is None
        assert recorder.errors == ["No file associated with current context"]
        assert factory.history == []

    def test_not_in_repository(self, repo, recorder, fake_git_factory):
        app = make_app(recorder, fake_git_factory(toplevel=None))

        assert app.generate_range_link(Selection(str(repo / "src" / "app.py"))) is None
        assert recorder.errors == ["Not in a git repository"]

    def test_module_level_function_uses_configuration(self, repo, recorder, monkeypatch, fake_git_factory):
        monkeypatch.setattr("git_permalink_maker.app.GitRepo", fake_git_factory(toplevel=str(repo)))
        global_prefs.configure(action=recorder.action, include_line_in_point_mode=False)

        url = generate_range_link(Selection(str(repo / "src" / "app.py"), cursor_line=9))

        assert url == f"https://github.com/owner/repo/blob/{HEAD}/src/app.py"
        assert recorder.urls == [url]


class TestRepoLink:
    def test_repo_link(self, repo, recorder, fake_git_factory):
        factory = fake_git_factory(toplevel=str(repo))
        app = make_app(recorder, factory)

        url = app.generate_repo_link(str(repo))

        assert url == "https://github.com/owner/repo"
        assert recorder.urls == [url]
        assert not any(args[:2] == ["rev-parse", "HEAD"] for args in factory.history)

    def test_repo_link_from_file_path(self, repo, recorder, fake_git_factory):
        app = make_app(recorder, fake_git_factory(toplevel=str(repo)))

        assert app.generate_repo_link(str(repo / "src" / "app.py")) == "https://github.com/owner/repo"

    def test_cgit_repo_link_keeps_suffix(self, repo, recorder, fake_git_factory):
        factory = fake_git_factory(
            toplevel=str(repo),
            remotes={"origin": "https://git.kernel.org/pub/scm/linux/kernel/git/torvalds/linux.git"},
        )
        app = make_app(recorder, factory)

        assert app.generate_repo_link(str(repo)) == (
            "https://git.kernel.org/pub/scm/linux/kernel/git/torvalds/linux.git/"
        )

    def test_unknown_host_falls_back_to_plain_url(self, repo, recorder, fake_git_factory):
        factory = fake_git_factory(toplevel=str(repo), remotes={"origin": "https://git.example.org:8443/o/r.git"})
        app = make_app(recorder, factory)

        assert app.generate_repo_link(str(repo)) == "https://git.example.org:8443/o/r"
        assert recorder.errors == []

    def test_repo_link_without_remote(self, repo, recorder, fake_git_factory):
        app = make_app(recorder, fake_git_factory(toplevel=str(repo), remotes={}))

        assert app.generate_repo_link(str(repo)) is None
        assert recorder.errors == ["No git remote found"]
        assert recorder.urls == []
