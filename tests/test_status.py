"""Tests for the parsed status view."""

from mcping.status import ServerStatus


class TestFromDocument:
    def test_full_document(self):
        document = {
            "version": {"name": "Paper 1.20.4", "protocol": 765},
            "players": {
                "max": 100,
                "online": 5,
                "sample": [
                    {"name": "Alex", "id": "4566e69f-c907-48ee-8d71-d7ba5aa00d20"},
                    {"name": "Steve", "id": "8667ba71-b85a-4004-af54-457a9734eed7"},
                ],
            },
            "description": {"text": "Hello ", "extra": [{"text": "world", "color": "green"}]},
            "favicon": "data:image/png;base64,AAAA",
        }

        status = ServerStatus.from_document(document)

        assert status.version_name == "Paper 1.20.4"
        assert status.protocol == 765
        assert status.players_online == 5
        assert status.players_max == 100
        assert status.player_sample == ("Alex", "Steve")
        assert status.description == "Hello §aworld"
        assert status.motd == "Hello world"
        assert status.has_favicon
        assert status.raw is document

    def test_plain_string_description(self):
        status = ServerStatus.from_document({"description": "§6Gold §rserver"})

        assert status.description == "§6Gold §rserver"
        assert status.motd == "Gold server"

    def test_empty_document(self):
        status = ServerStatus.from_document({})

        assert status.version_name == ""
        assert status.protocol is None
        assert status.players_online == 0
        assert status.players_max == 0
        assert status.player_sample == ()
        assert status.description == ""
        assert not status.has_favicon

    def test_non_list_sample(self):
        status = ServerStatus.from_document(
            {"players": {"online": 1, "max": 2, "sample": 5}}
        )

        assert status.players_online == 1
        assert status.players_max == 2
        assert status.player_sample == ()

    def test_non_object_document(self):
        status = ServerStatus.from_document(["not", "a", "status"])
        assert status.raw == {}

    def test_malformed_sections(self):
        document = {
            "version": "1.20",
            "players": {"online": "many", "max": True, "sample": [{"id": "x"}, "bob"]},
        }
        status = ServerStatus.from_document(document)

        assert status.version_name == ""
        assert status.players_online == 0
        assert status.players_max == 0
        assert status.player_sample == ()
