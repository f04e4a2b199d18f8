import pytest

from argo_convert.database.connection import DatabaseManager
from argo_convert.database.sink import MemorySink, SQLDocumentSink
from argo_convert.ingestion.argo_reader import ArgoNetCDFReader

from sample_data_generator import SampleArgoGenerator


class DatasetReader(ArgoNetCDFReader):
    """Reader serving in-memory datasets by file name"""

    def __init__(self, datasets):
        self.datasets = datasets

    def read_argo_file(self, file_path):
        if file_path not in self.datasets:
            raise OSError(f"No such file: {file_path}")
        return self.read_dataset(self.datasets[file_path], source=file_path)


@pytest.fixture
def generator(tmp_path):
    return SampleArgoGenerator(str(tmp_path / "argo"))


@pytest.fixture
def memory_sink():
    return MemorySink()


@pytest.fixture
def db_manager():
    manager = DatabaseManager("sqlite://")
    manager.create_tables()
    yield manager
    manager.drop_tables()
    manager.engine.dispose()


@pytest.fixture
def sql_sink(db_manager):
    return SQLDocumentSink(db_manager)


@pytest.fixture
def dataset_reader():
    return DatasetReader
