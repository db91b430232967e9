import pytest

from toolbelt.flags import URL, Path, PathSlice, PathState, set_fallback


@pytest.fixture(autouse=True)
def _unsandboxed(monkeypatch):
    monkeypatch.delenv("GO_SANDBOX_ACTIVE", raising=False)


class _Recorder:
    def __init__(self):
        self.values = []

    def set(self, value):
        self.values.append(value)


def test_path_without_suffixes(tmp_path):
    target = str(tmp_path / "file")
    path = Path()
    path.set(target)
    assert path.value == target
    assert path.values == [target]
    assert str(path) == target


def test_path_with_suffixes(tmp_path):
    base = str(tmp_path / "file")
    path = Path(suffixes=["a", "b"])
    path.set(base)
    assert path.values == [base + ".a", base + ".b"]
    assert path.value == base


def test_must_exist_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        Path(state=PathState.MUST_EXIST).set(str(tmp_path / "missing"))


def test_must_exist_present(tmp_path):
    target = tmp_path / "file"
    target.write_bytes(b"x")
    path = Path(state=PathState.MUST_EXIST | PathState.MUST_BE_FILE)
    path.set(str(target))
    assert path.values == [str(target)]


def test_must_not_exist(tmp_path):
    target = tmp_path / "file"
    target.write_bytes(b"x")
    with pytest.raises(FileExistsError):
        Path(state=PathState.MUST_NOT_EXIST).set(str(target))


def test_must_be_dir(tmp_path):
    target = tmp_path / "file"
    target.write_bytes(b"x")
    with pytest.raises(NotADirectoryError):
        Path(state=PathState.MUST_BE_DIR).set(str(target))


def test_must_be_file(tmp_path):
    with pytest.raises(ValueError):
        Path(state=PathState.MUST_BE_FILE).set(str(tmp_path))


def test_suffix_paths_are_checked(tmp_path):
    (tmp_path / "f.a").write_bytes(b"x")
    with pytest.raises(FileNotFoundError):
        Path(state=PathState.MUST_EXIST, suffixes=["a", "b"]).set(str(tmp_path / "f"))


def test_sandboxed_skips_checks(tmp_path, monkeypatch):
    monkeypatch.setenv("GO_SANDBOX_ACTIVE", "1")
    target = str(tmp_path / "missing")
    path = Path(state=PathState.MUST_EXIST)
    path.set(target)
    assert path.values == [target]


def test_path_slice(tmp_path):
    first, second = str(tmp_path / "a"), str(tmp_path / "b")
    paths = PathSlice()
    paths.set(first)
    paths.set(second)
    assert paths.string_slice() == [first, second]
    assert str(paths) == f"[{first}, {second}]"


def test_empty_path_slice():
    assert str(PathSlice()) == "[]"


def test_path_slice_keeps_failed_value(tmp_path):
    paths = PathSlice(state=PathState.MUST_EXIST)
    target = str(tmp_path / "missing")
    with pytest.raises(FileNotFoundError):
        paths.set(target)
    assert paths.string_slice() == [target]


def test_url_round_trip():
    url = URL()
    assert str(url) == ""
    url.set("https://example.com/a/b?c=d")
    assert str(url) == "https://example.com/a/b?c=d"
    assert url.value.netloc == "example.com"


def test_url_invalid():
    with pytest.raises(ValueError):
        URL().set("http://[::1")


def test_fallback_first_non_empty_string():
    flag = _Recorder()
    set_fallback(flag, False, "", "first", "second")
    assert flag.values == ["first"]


def test_fallback_ignored_when_changed():
    flag = _Recorder()
    set_fallback(flag, True, "value")
    assert flag.values == []


def test_fallback_list_sets_each():
    flag = _Recorder()
    set_fallback(flag, False, None, ["a", "b"], ["c"])
    assert flag.values == ["a", "b"]


def test_fallback_missing_flag_is_ignored():
    assert set_fallback(None, False, "value") is None


def test_fallback_invalid_type():
    with pytest.raises(TypeError):
        set_fallback(_Recorder(), False, 3)