import json

import pytest

from argo_convert.database import connection
from argo_convert.database.connection import DatabaseError
from argo_convert.database.models import ProfileDocument
from argo_convert.database.sink import DocumentSink, DuplicateDocumentError, MemorySink, SQLDocumentSink
from argo_convert.documents.assembler import assemble, build_meta_fields, build_meta_record
from argo_convert.ingestion.argo_reader import ArgoNetCDFReader


@pytest.fixture
def records(generator):
    reader = ArgoNetCDFReader()

    def _records(cycle_number=1, data_mode='R', meta_id='2901237_m0'):
        fields = reader.read_dataset(generator.generate_profile(cycle_number=cycle_number, data_mode=data_mode))
        return assemble(fields, meta_id), build_meta_record(meta_id, build_meta_fields(fields))
    return _records


def test_duplicate_error_is_database_error():
    assert issubclass(DuplicateDocumentError, DatabaseError)


def test_sql_sink_stores_documents(sql_sink, records):
    profile, meta = records()
    sql_sink.insert_records(profile, meta)

    assert sql_sink.find_profile('2901237_1') == profile.to_document()
    assert sql_sink.find_metadata('2901237_m0') == meta.to_document()
    assert sql_sink.find_profile('2901237_2') is None


def test_sql_sink_mirrors_query_columns(sql_sink, db_manager, records):
    profile, meta = records(data_mode='D')
    sql_sink.insert_records(profile, meta)

    with db_manager.session_scope() as session:
        row = session.get(ProfileDocument, '2901237_1')
        assert row.metadata_id == '2901237_m0'
        assert row.cycle_number == 1
        assert row.data_mode == 'D'
        assert row.longitude == 57.5
        assert row.latitude == -40.25
        assert row.juld == 25000.5


def test_sql_sink_profile_without_new_metadata(sql_sink, records):
    first, meta = records(cycle_number=1)
    second, _ = records(cycle_number=2)
    sql_sink.insert_records(first, meta)
    sql_sink.insert_records(second)

    assert sql_sink.count_profiles() == 2
    assert sql_sink.count_metadata() == 1


def test_sql_sink_rejects_duplicate_profile(sql_sink, records):
    profile, meta = records()
    sql_sink.insert_records(profile, meta)

    with pytest.raises(DuplicateDocumentError):
        sql_sink.insert_records(profile)
    assert sql_sink.count_profiles() == 1


def test_sql_sink_insert_is_all_or_nothing(sql_sink, records):
    profile, meta = records()
    sql_sink.insert_records(profile, meta)
    _, other_meta = records(meta_id='2901237_m1')

    with pytest.raises(DuplicateDocumentError):
        sql_sink.insert_records(profile, other_meta)

    assert sql_sink.find_metadata('2901237_m1') is None
    assert sql_sink.count_metadata() == 1


def test_memory_sink_stores_documents(memory_sink, records):
    profile, meta = records()
    memory_sink.insert_records(profile, meta)

    assert memory_sink.find_profile('2901237_1') == profile.to_document()
    assert memory_sink.find_metadata('2901237_m0') == meta.to_document()
    assert len(memory_sink.documents()) == 2


def test_memory_sink_rejects_duplicates_atomically(memory_sink, records):
    profile, meta = records()
    memory_sink.insert_records(profile, meta)
    _, other_meta = records(meta_id='2901237_m1')

    with pytest.raises(DuplicateDocumentError):
        memory_sink.insert_records(profile, other_meta)
    with pytest.raises(DuplicateDocumentError):
        memory_sink.insert_records(records(cycle_number=2)[0], meta)

    assert memory_sink.find_metadata('2901237_m1') is None
    assert memory_sink.find_profile('2901237_2') is None


def test_memory_sink_json_dump(memory_sink, records):
    profile, meta = records()
    memory_sink.insert_records(profile, meta)

    dumped = json.loads(memory_sink.to_json())
    assert dumped['metadata'][0]['_id'] == '2901237_m0'
    assert dumped['profiles'][0]['metadata'] == ['2901237_m0']


def test_document_sink_is_abstract():
    with pytest.raises(TypeError):
        DocumentSink()


def test_sink_must_implement_lookups():
    class InsertOnlySink(DocumentSink):
        def insert_records(self, profile, metadata=None):
            pass

    with pytest.raises(TypeError):
        InsertOnlySink()


def test_default_manager_uses_configured_url(monkeypatch):
    monkeypatch.setenv('ARGO_DATABASE_URL', 'sqlite://')
    monkeypatch.setattr(connection, '_db_manager', None)

    sink = SQLDocumentSink()
    manager = sink.db_manager
    assert manager.database_url == 'sqlite://'
    assert connection.get_db_manager() is manager
    manager.engine.dispose()
