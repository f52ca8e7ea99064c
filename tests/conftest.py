import pytest
import yaml

from tests.fake.fake_address import FakeAddressCodec
from txrep.core.codec.parser import TxrepParser
from txrep.core.codec.serializer import TxrepSerializer
from txrep.core.facade import TxrepCodec


@pytest.fixture
def address_codec():
    return FakeAddressCodec()


@pytest.fixture
def serializer(address_codec):
    return TxrepSerializer(address_codec)


@pytest.fixture
def parser(address_codec):
    return TxrepParser(address_codec)


@pytest.fixture
def codec(serializer, parser):
    return TxrepCodec(serializer, parser)


@pytest.fixture
def config_file(tmp_path):
    file = tmp_path / "txrep.yaml"
    data = {
        "log_level": "debug",
        "render": {
            "format": "json",
        },
        "encode": {
            "annotate": True,
        },
    }
    file.write_text(yaml.dump(data))
    return file
