"""Tests for PosService, including the OSM import flow."""
import pytest
import requests
from pydantic import ValidationError

from campus_coffee.errors import translate
from campus_coffee.exceptions import (
    DuplicatePosNameException,
    OsmNodeMissingFieldsException,
    OsmNodeNotFoundException,
    OsmNodeParseException,
    OsmUpstreamUnavailableException,
    PosNotFoundException,
)
from campus_coffee.models import Pos, PosType
from campus_coffee.repository import InMemoryPosRepository

from .conftest import CAFE_XML, NODE_ID, NO_HOUSENUMBER_XML, make_response


def existing_pos(name="Café Central"):
    return Pos(name=name, street="Marstallhof", house_number="3")


class TestImportFromOsmNode:
    """Tests for PosService.import_from_osm_node."""

    def test_successful_import(self, make_service, repository):
        service = make_service(make_response(200, CAFE_XML))

        pos = service.import_from_osm_node(NODE_ID)

        assert pos.id is not None
        assert pos.name == "Café Central"
        assert pos.street == "Hauptstr."
        assert pos.house_number == "1"
        assert pos.type == PosType.CAFE
        assert pos.latitude == 49.4
        assert pos.longitude == 8.7
        assert pos.created_at is not None
        assert repository.count() == 1
        assert service.get_by_id(pos.id) == pos

    def test_missing_housenumber(self, make_service, repository):
        service = make_service(make_response(200, NO_HOUSENUMBER_XML))

        with pytest.raises(OsmNodeMissingFieldsException) as exc_info:
            service.import_from_osm_node(NODE_ID)

        assert exc_info.value.missing_fields == {"addr:housenumber"}
        assert translate(exc_info.value).status_code == 422
        assert repository.count() == 0

    def test_node_zero_not_found(self, make_service):
        service = make_service(make_response(404, "Not found"))

        with pytest.raises(OsmNodeNotFoundException) as exc_info:
            service.import_from_osm_node(0)

        assert exc_info.value.osm_node_id == 0
        assert translate(exc_info.value).status_code == 404

    @pytest.mark.parametrize("response", [
        make_response(404, ""),
        make_response(200, ""),
        make_response(200, '<osm version="0.6"/>'),
    ])
    def test_missing_node_always_not_found(self, make_service, response):
        service = make_service(response)

        with pytest.raises(OsmNodeNotFoundException) as exc_info:
            service.import_from_osm_node(555)

        assert exc_info.value.osm_node_id == 555

    def test_duplicate_name_rejected(self, make_service, repository):
        original = repository.upsert(existing_pos())
        service = make_service(make_response(200, CAFE_XML))

        with pytest.raises(DuplicatePosNameException) as exc_info:
            service.import_from_osm_node(NODE_ID)

        assert exc_info.value.name == "Café Central"
        assert repository.count() == 1
        assert repository.find_by_id(original.id) == original

    @pytest.mark.parametrize("result, expected", [
        (make_response(404, ""), OsmNodeNotFoundException),
        (make_response(503, "busy"), OsmUpstreamUnavailableException),
        (requests.exceptions.ReadTimeout("slow"), OsmUpstreamUnavailableException),
        (make_response(200, "<osm><node"), OsmNodeParseException),
        (make_response(200, CAFE_XML.replace('lat="49.4"', 'lat="95.0"')), OsmNodeParseException),
        (make_response(200, NO_HOUSENUMBER_XML), OsmNodeMissingFieldsException),
    ])
    def test_failed_import_writes_nothing(self, make_service, repository, result, expected):
        repository.upsert(existing_pos("Other Cafe"))
        before = repository.find_all()
        service = make_service(result)

        with pytest.raises(expected):
            service.import_from_osm_node(NODE_ID)

        assert repository.find_all() == before

    def test_out_of_range_coordinate_is_server_fault(self, make_service, repository):
        service = make_service(make_response(200, CAFE_XML.replace('lat="49.4"', 'lat="95.0"')))

        with pytest.raises(OsmNodeParseException) as exc_info:
            service.import_from_osm_node(NODE_ID)

        response = translate(exc_info.value)
        assert response.status_code == 500
        assert response.error_code == "OsmNodeParseException"
        assert repository.count() == 0

    @pytest.mark.parametrize("bad_id", [-1, "123", 1.5, True])
    def test_invalid_node_id_rejected_before_fetch(self, make_service, bad_id):
        service = make_service()

        with pytest.raises(ValueError):
            service.import_from_osm_node(bad_id)

        assert service.osm_client.session.calls == []

    def test_repository_constraint_catches_race(self, make_service, repository):
        # Simulates a concurrent import landing between the check and the save
        repository.upsert(existing_pos())
        repository.find_by_name = lambda name: None
        service = make_service(make_response(200, CAFE_XML))

        with pytest.raises(DuplicatePosNameException):
            service.import_from_osm_node(NODE_ID)

        assert repository.count() == 1

    def test_import_twice_second_is_duplicate(self, make_service, repository):
        service = make_service(make_response(200, CAFE_XML), make_response(200, CAFE_XML))

        service.import_from_osm_node(NODE_ID)
        with pytest.raises(DuplicatePosNameException):
            service.import_from_osm_node(NODE_ID)

        assert repository.count() == 1


class TestPosOperations:
    """Tests for the generic POS operations."""

    def test_create_assigns_id_and_timestamps(self, make_service):
        service = make_service()

        pos = service.upsert(existing_pos())

        assert pos.id == 1
        assert pos.created_at is not None
        assert pos.updated_at == pos.created_at

    def test_update_existing(self, make_service):
        service = make_service()
        created = service.upsert(existing_pos())

        updated = service.upsert(created.model_copy(update={"description": "Now with oat milk"}))

        assert updated.id == created.id
        assert updated.description == "Now with oat milk"
        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.updated_at
        assert len(service.get_all()) == 1

    def test_update_unknown_id(self, make_service):
        service = make_service()

        with pytest.raises(PosNotFoundException):
            service.upsert(existing_pos().model_copy(update={"id": 99}))

    def test_update_keeping_own_name_is_allowed(self, make_service):
        service = make_service()
        created = service.upsert(existing_pos())

        service.upsert(created.model_copy(update={"street": "Neue Str."}))

        assert service.get_by_id(created.id).street == "Neue Str."

    def test_rename_to_taken_name(self, make_service):
        service = make_service()
        service.upsert(existing_pos("A"))
        second = service.upsert(existing_pos("B"))

        with pytest.raises(DuplicatePosNameException):
            service.upsert(second.model_copy(update={"name": "A"}))

    def test_get_by_id_not_found(self, make_service):
        with pytest.raises(PosNotFoundException) as exc_info:
            make_service().get_by_id(404)

        assert exc_info.value.pos_id == 404

    def test_get_all_and_clear(self, make_service):
        service = make_service()
        service.upsert(existing_pos("B"))
        service.upsert(existing_pos("A"))

        assert [pos.name for pos in service.get_all()] == ["B", "A"]

        service.clear()

        assert service.get_all() == []

    def test_returned_records_cannot_be_modified(self, make_service):
        service = make_service()
        service.upsert(existing_pos("A"))
        service.upsert(existing_pos("B"))

        with pytest.raises(ValidationError):
            service.get_by_id(1).name = "B"

        assert [pos.name for pos in service.get_all()] == ["A", "B"]

    def test_blank_name_is_invalid(self):
        with pytest.raises(ValueError):
            Pos(name="  ", street="Hauptstr.", house_number="1")


class TestJsonStore:
    """Tests for InMemoryPosRepository file persistence."""

    def test_save_and_load(self, tmp_path):
        path = str(tmp_path / "store" / "pos.json")
        repository = InMemoryPosRepository()
        first = repository.upsert(existing_pos("A"))
        repository.upsert(existing_pos("B"))
        repository.save(path)

        loaded = InMemoryPosRepository.load(path)

        assert loaded.find_all() == repository.find_all()
        assert loaded.find_by_name("A") == first
        assert loaded.upsert(existing_pos("C")).id == 3

    def test_load_missing_file(self, tmp_path):
        assert InMemoryPosRepository.load(str(tmp_path / "absent.json")).count() == 0

    def test_load_rejects_record_without_id(self, tmp_path):
        path = tmp_path / "pos.json"
        path.write_text(
            '[{"id": null, "name": "A", "street": "Hauptstr.", "house_number": "1"}]',
            encoding="utf-8",
        )

        with pytest.raises(ValueError, match="without id"):
            InMemoryPosRepository.load(str(path))
