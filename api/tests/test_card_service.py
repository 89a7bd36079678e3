"""Tests for card creation, ingestion and edits."""

from datetime import datetime, timedelta

import pytest
from sqlmodel import Session

from studystack.core.exceptions import NotFoundError, ValidationError
from studystack.services import card_service, hierarchy_service

from conftest import OTHER_USER_ID, TEST_USER_ID

NOW = datetime(2024, 1, 10, 10, 0)
TOPIC_PATH = ["Bio", "Animals", "Mammals", "Pets", "Cats"]


class TestIngestRawText:
    def test_one_card_per_sentence(self, db_session: Session) -> None:
        cards = card_service.ingest_raw_text(
            db_session, TEST_USER_ID, ["Bio"], "Cats are mammals. Cats can purr.\n\nDogs bark.", now=NOW
        )

        assert [card.content for card in cards] == ["Cats are mammals.", "Cats can purr.", "Dogs bark."]
        for card in cards:
            assert card.subject == "Bio"
            assert card.module is None
            assert card.created_by == TEST_USER_ID
            assert card.schedule_stage == 1
            assert card.schedule_next_review == NOW + timedelta(days=1)
            assert card.next_review is None

    def test_keywords_are_token_indices(self, db_session: Session) -> None:
        [card] = card_service.ingest_raw_text(
            db_session, TEST_USER_ID, TOPIC_PATH, "Photosynthesis converts light into chemical energy.", now=NOW
        )

        tokens = card.content.split()
        assert [tokens[index] for index in card.keywords] == ["Photosynthesis", "converts"]

    def test_full_path_is_kept(self, db_session: Session) -> None:
        [card] = card_service.ingest_raw_text(db_session, TEST_USER_ID, TOPIC_PATH, "Cats purr.")
        assert card.path == tuple(TOPIC_PATH)

    @pytest.mark.parametrize("path, raw_text", [
        ([None], "Cats purr."),
        ([""], "Cats purr."),
        (["Bio"], ""),
        (["Bio"], "   "),
    ])
    def test_subject_and_text_required(self, db_session: Session, path, raw_text) -> None:
        with pytest.raises(ValidationError):
            card_service.ingest_raw_text(db_session, TEST_USER_ID, path, raw_text)


class TestSubmitRaw:
    def test_placeholder_card_is_unscheduled(self, db_session: Session) -> None:
        card = card_service.submit_raw(db_session, TEST_USER_ID, ["Bio", "Animals"], "New module")

        assert card.content == "New module"
        assert card.keywords == []
        assert card.schedule_stage == 0
        assert card.schedule_next_review is None
        assert hierarchy_service.list_children(db_session, TEST_USER_ID, ["Bio"]) == ["Animals"]

    def test_subject_required(self, db_session: Session) -> None:
        with pytest.raises(ValidationError):
            card_service.submit_raw(db_session, TEST_USER_ID, [None, "Animals"], "New module")


class TestAddCard:
    def test_scheduled_on_stage_one(self, db_session: Session) -> None:
        card = card_service.add_card(db_session, TEST_USER_ID, TOPIC_PATH, "Cats purr.", now=NOW)

        assert card.path == tuple(TOPIC_PATH)
        assert card.keywords == []
        assert card.schedule_stage == 1
        assert card.schedule_next_review == NOW + timedelta(days=1)
        assert card.created_at == NOW

    def test_content_required(self, db_session: Session) -> None:
        with pytest.raises(ValidationError):
            card_service.add_card(db_session, TEST_USER_ID, TOPIC_PATH, "")


class TestUpdateContent:
    def test_stale_keywords_are_dropped(self, db_session: Session, make_card) -> None:
        card = make_card(content="Cats are small mammals.", keywords=[0, 3])

        updated = card_service.update_content(db_session, TEST_USER_ID, card.id, "Cats purr.")

        assert updated.content == "Cats purr."
        assert updated.keywords == [0]

    def test_valid_keywords_are_kept(self, db_session: Session, make_card) -> None:
        card = make_card(content="Cats are mammals.", keywords=[2])

        updated = card_service.update_content(db_session, TEST_USER_ID, card.id, "Dogs are mammals.")

        assert updated.keywords == [2]

    def test_empty_content_rejected(self, db_session: Session, make_card) -> None:
        card = make_card()
        with pytest.raises(ValidationError):
            card_service.update_content(db_session, TEST_USER_ID, card.id, "")

    def test_other_owner(self, db_session: Session, make_card) -> None:
        card = make_card(owner=OTHER_USER_ID)
        with pytest.raises(NotFoundError):
            card_service.update_content(db_session, TEST_USER_ID, card.id, "Mine now.")


class TestUpdateKeywords:
    def test_stored_sorted_and_unique(self, db_session: Session, make_card) -> None:
        card = make_card(content="Cats are small mammals.")

        updated = card_service.update_keywords(db_session, TEST_USER_ID, card.id, [3, 0, 3])

        assert updated.keywords == [0, 3]

    @pytest.mark.parametrize("keywords", [[], [-1], [4], [0, 10]])
    def test_invalid_indices_rejected(self, db_session: Session, make_card, keywords) -> None:
        card = make_card(content="Cats are small mammals.")
        with pytest.raises(ValidationError):
            card_service.update_keywords(db_session, TEST_USER_ID, card.id, keywords)

    def test_unknown_card(self, db_session: Session) -> None:
        with pytest.raises(NotFoundError):
            card_service.update_keywords(db_session, TEST_USER_ID, 42, [0])


class TestOrdering:
    def test_update_order(self, db_session: Session, make_card) -> None:
        card = make_card()
        assert card_service.update_order(db_session, TEST_USER_ID, card.id, 7).order == 7

    def test_reorder_topic_cards(self, db_session: Session, make_card) -> None:
        first = make_card(content="First.")
        second = make_card(content="Second.")
        third = make_card(content="Third.")
        outsider = make_card(content="Dogs bark.", topic="Dogs")

        modified = card_service.reorder_topic_cards(
            db_session, TEST_USER_ID, TOPIC_PATH, [third.id, outsider.id, first.id, second.id]
        )

        assert modified == 3
        cards = hierarchy_service.list_topic_cards(db_session, TEST_USER_ID, TOPIC_PATH)
        assert [card.id for card in cards] == [third.id, first.id, second.id]
        db_session.refresh(outsider)
        assert outsider.order == 0

    def test_reorder_requires_ids(self, db_session: Session) -> None:
        with pytest.raises(ValidationError):
            card_service.reorder_topic_cards(db_session, TEST_USER_ID, TOPIC_PATH, [])


class TestDeleteCard:
    def test_delete(self, db_session: Session, make_card) -> None:
        card = make_card()
        card_service.delete_card(db_session, TEST_USER_ID, card.id)
        assert hierarchy_service.list_topic_cards(db_session, TEST_USER_ID, TOPIC_PATH) == []

    def test_other_owner(self, db_session: Session, make_card) -> None:
        card = make_card(owner=OTHER_USER_ID)
        with pytest.raises(NotFoundError):
            card_service.delete_card(db_session, TEST_USER_ID, card.id)
