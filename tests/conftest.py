import pytest
from pathlib import Path

from roleforge.config import BuilderConfig
from roleforge.datacls import Release, Package, Job, Role


def _write(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture
def release_dir(tmp_path: Path) -> Path:
    """A small tor release with two jobs."""
    root = tmp_path / "tor-boshrelease"
    _write(root / "LICENSE.md", "release license")

    hostname = root / "jobs" / "new_hostname"
    _write(hostname / "job.MF", "name: new_hostname\n")
    _write(hostname / "monit", "check process new_hostname\n")
    _write(hostname / "templates" / "bin" / "run.erb", "#!/bin/bash\nhostname <%= p('name') %>\n")

    tor = root / "jobs" / "tor"
    _write(tor / "job.MF", "name: tor\n")
    _write(tor / "monit", "check process tor\n")
    _write(tor / "templates" / "bin" / "monit_debugger", "#!/bin/bash\n")
    _write(tor / "templates" / "bin" / "run.erb", "#!/bin/bash\nexec tor\n")
    _write(tor / "templates" / "data" / "properties.sh.erb", "export TOR_PORT=<%= p('port') %>\n")
    return root


@pytest.fixture
def compiled_dir(tmp_path: Path) -> Path:
    """Compiled packages, one directory per package name."""
    root = tmp_path / "compiled"
    _write(root / "tor" / "bar", "compiled tor")
    _write(root / "tor" / "tor" / "src" / "LICENSE.txt", "tor license")
    _write(root / "libevent" / "lib" / "libevent.so", "compiled libevent")
    _write(root / "libevent" / "libevent" / "LICENSE", "libevent license")
    return root


@pytest.fixture
def scripts_dir(tmp_path: Path) -> Path:
    root = tmp_path / "scripts"
    _write(root / "myrole.sh", "#!/bin/bash\necho myrole\n")
    _write(root / "setup_env.sh", "#!/bin/bash\necho env\n")
    return root


@pytest.fixture
def release(release_dir: Path) -> Release:
    return Release(name="tor", version="0.3.5", path=release_dir)


@pytest.fixture
def jobs(release: Release, release_dir: Path):
    tor_pkg = Package(name="tor", fingerprint="f-tor")
    libevent_pkg = Package(name="libevent", fingerprint="f-libevent")
    return {
        "new_hostname": Job(
            name="new_hostname",
            path=release_dir / "jobs" / "new_hostname",
            release=release,
            fingerprint="j-hostname",
        ),
        "tor": Job(
            name="tor",
            path=release_dir / "jobs" / "tor",
            release=release,
            packages=[libevent_pkg, tor_pkg],
            fingerprint="j-tor",
        ),
    }


@pytest.fixture
def composite_role(jobs, scripts_dir: Path) -> Role:
    return Role(
        name="myrole",
        jobs=[jobs["new_hostname"], jobs["tor"]],
        scripts=[scripts_dir / "myrole.sh"],
    )


@pytest.fixture
def simple_role(jobs) -> Role:
    return Role(name="foorole", jobs=[jobs["tor"]])


@pytest.fixture
def make_config(tmp_path: Path, compiled_dir: Path):
    """Factory for builder settings; keyword arguments override the defaults."""
    def _make(**overrides) -> BuilderConfig:
        settings = {
            "repository": "foo",
            "compiled_packages_path": compiled_dir,
            "target_path": tmp_path / "output",
            "config_store_address": "http://127.0.0.1:8500",
            "config_store_prefix": "hcf",
            "version": "3.14.15",
            "base_image_version": "6.28.30",
        }
        settings.update(overrides)
        return BuilderConfig(**settings)
    return _make


@pytest.fixture
def builder_config(make_config) -> BuilderConfig:
    return make_config()
