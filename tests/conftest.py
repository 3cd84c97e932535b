import pytest

from binaryinstall.config.models import InstallationConfig, RemoteTarget, UploadSpec
from tests.helpers import RecordingExecutor


@pytest.fixture
def target():
    return RemoteTarget(host="ec2-1-2-3-4.compute-1.amazonaws.com", ssh_key_path="/keys/deploy.pem")


@pytest.fixture
def make_config(target):
    def _make(*paths, **kwargs):
        uploads = [UploadSpec(path=p) for p in paths]
        kwargs.setdefault("backup_dir", "/bak")
        return InstallationConfig(target=target, uploads=uploads, **kwargs)
    return _make


@pytest.fixture
def recording_executor():
    return RecordingExecutor()
