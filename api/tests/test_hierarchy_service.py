"""Tests for listing, renaming and deleting hierarchy nodes."""

import pytest
from sqlmodel import Session, select

from studystack.core.exceptions import NotFoundError, ValidationError
from studystack.models import Card, ForgottenBlanks, ReviewHistoryEntry
from studystack.services import blanks_service, hierarchy_service, srs_service

from conftest import OTHER_USER_ID, TEST_USER_ID


def all_cards(db_session: Session) -> list:
    db_session.expire_all()
    return list(db_session.exec(select(Card).order_by(Card.id)).all())


class TestListChildren:
    def test_subjects(self, db_session: Session, make_card) -> None:
        make_card(subject="Bio")
        make_card(subject="Art")
        make_card(subject="Bio", module="Plants")
        make_card(subject="Math", owner=OTHER_USER_ID)

        assert hierarchy_service.list_children(db_session, TEST_USER_ID, []) == ["Art", "Bio"]

    def test_modules_exclude_missing_values(self, db_session: Session, make_card) -> None:
        make_card(module="Animals")
        make_card(module="Plants")
        make_card(module=None)
        make_card(module="")
        make_card(subject="Art", module="Painting")

        assert hierarchy_service.list_children(db_session, TEST_USER_ID, ["Bio"]) == ["Animals", "Plants"]

    def test_each_level_is_scoped_by_prefix(self, db_session: Session, make_card) -> None:
        make_card(topic="Cats")
        make_card(topic="Dogs")
        make_card(section="Wild", topic="Wolves")
        make_card(chapter="Birds", section="Pets", topic="Parrots")

        assert hierarchy_service.list_children(db_session, TEST_USER_ID, ["Bio", "Animals"]) == ["Birds", "Mammals"]
        assert hierarchy_service.list_children(
            db_session, TEST_USER_ID, ["Bio", "Animals", "Mammals"]
        ) == ["Pets", "Wild"]
        assert hierarchy_service.list_children(
            db_session, TEST_USER_ID, ["Bio", "Animals", "Mammals", "Pets"]
        ) == ["Cats", "Dogs"]

    def test_topics_have_no_children(self, db_session: Session) -> None:
        with pytest.raises(ValidationError):
            hierarchy_service.list_children(db_session, TEST_USER_ID, ["Bio", "Animals", "Mammals", "Pets", "Cats"])


class TestListTopicCards:
    def test_ordered_by_order_then_id(self, db_session: Session, make_card) -> None:
        third = make_card(content="Third.", order=2)
        first = make_card(content="First.", order=0)
        second = make_card(content="Second.", order=0)
        make_card(content="Elsewhere.", topic="Dogs")

        cards = hierarchy_service.list_topic_cards(db_session, TEST_USER_ID, ["Bio", "Animals", "Mammals", "Pets", "Cats"])

        assert [card.id for card in cards] == [first.id, second.id, third.id]


class TestRenameNode:
    def test_rename_module_keeps_deeper_segments(self, db_session: Session, make_card) -> None:
        cat = make_card(topic="Cats")
        wolf = make_card(section="Wild", topic="Wolves")
        plant = make_card(module="Plants", chapter="Trees", section="Oak", topic="Leaves")
        other_subject = make_card(subject="Art")

        modified = hierarchy_service.rename_node(db_session, TEST_USER_ID, ["Bio", "Animals"], "Zoology")

        assert modified == 2
        by_id = {card.id: card for card in all_cards(db_session)}
        assert by_id[cat.id].path == ("Bio", "Zoology", "Mammals", "Pets", "Cats")
        assert by_id[wolf.id].path == ("Bio", "Zoology", "Mammals", "Wild", "Wolves")
        assert by_id[plant.id].module == "Plants"
        assert by_id[other_subject.id].module == "Animals"

    def test_rename_topic(self, db_session: Session, make_card) -> None:
        make_card(topic="Cats")
        make_card(topic="Cats", content="Cats purr.")
        make_card(topic="Dogs")

        modified = hierarchy_service.rename_node(
            db_session, TEST_USER_ID, ["Bio", "Animals", "Mammals", "Pets", "Cats"], "Felines"
        )

        assert modified == 2
        assert hierarchy_service.list_children(
            db_session, TEST_USER_ID, ["Bio", "Animals", "Mammals", "Pets"]
        ) == ["Dogs", "Felines"]

    def test_rename_subject(self, db_session: Session, make_card) -> None:
        make_card()
        make_card(module="Plants")

        assert hierarchy_service.rename_node(db_session, TEST_USER_ID, ["Bio"], "Biology") == 2
        assert hierarchy_service.list_children(db_session, TEST_USER_ID, []) == ["Biology"]

    def test_same_name_is_noop(self, db_session: Session, make_card) -> None:
        make_card()
        make_card(module="Plants")
        before = [card.path for card in all_cards(db_session)]

        modified = hierarchy_service.rename_node(db_session, TEST_USER_ID, ["Bio", "Animals"], "Animals")

        assert modified == 0
        assert [card.path for card in all_cards(db_session)] == before

    @pytest.mark.parametrize("new_name", ["", "   ", None])
    def test_empty_name_rejected(self, db_session: Session, make_card, new_name) -> None:
        make_card()
        with pytest.raises(ValidationError):
            hierarchy_service.rename_node(db_session, TEST_USER_ID, ["Bio", "Animals"], new_name)

    def test_other_owner_untouched(self, db_session: Session, make_card) -> None:
        theirs = make_card(owner=OTHER_USER_ID)

        assert hierarchy_service.rename_node(db_session, TEST_USER_ID, ["Bio", "Animals"], "Zoology") == 0
        db_session.refresh(theirs)
        assert theirs.module == "Animals"


class TestDeleteNode:
    def test_delete_module_cascades_only_within_module(self, db_session: Session, make_card) -> None:
        make_card(topic="Cats")
        make_card(chapter="Birds", section="Pets", topic="Parrots")
        make_card(chapter=None, section=None, topic=None)
        plants = make_card(module="Plants")
        art = make_card(subject="Art")
        theirs = make_card(owner=OTHER_USER_ID)

        deleted = hierarchy_service.delete_node(db_session, TEST_USER_ID, ["Bio", "Animals"])

        assert deleted == 3
        assert [card.id for card in all_cards(db_session)] == [plants.id, art.id, theirs.id]

    def test_delete_topic(self, db_session: Session, make_card) -> None:
        make_card(topic="Cats")
        dogs = make_card(topic="Dogs")

        deleted = hierarchy_service.delete_node(
            db_session, TEST_USER_ID, ["Bio", "Animals", "Mammals", "Pets", "Cats"]
        )

        assert deleted == 1
        assert [card.id for card in all_cards(db_session)] == [dogs.id]

    def test_delete_subject(self, db_session: Session, make_card) -> None:
        make_card()
        make_card(module="Plants")

        assert hierarchy_service.delete_node(db_session, TEST_USER_ID, ["Bio"]) == 2
        assert all_cards(db_session) == []

    def test_child_rows_go_with_cards(self, db_session: Session, make_card) -> None:
        card = make_card(stage=1)
        srs_service.submit_card_review(db_session, TEST_USER_ID, card.id, True)
        srs_service.submit_topic_review(db_session, TEST_USER_ID, "Cats", True)
        blanks_service.update_forgotten_blanks(db_session, TEST_USER_ID, card.id, TEST_USER_ID, [0])

        hierarchy_service.delete_node(db_session, TEST_USER_ID, ["Bio", "Animals"])

        assert db_session.exec(select(ReviewHistoryEntry)).all() == []
        assert db_session.exec(select(ForgottenBlanks)).all() == []

    def test_deleted_cards_leave_review_batches(self, db_session: Session, make_card) -> None:
        make_card(stage=1)
        hierarchy_service.delete_node(db_session, TEST_USER_ID, ["Bio"])

        with pytest.raises(NotFoundError):
            srs_service.submit_topic_review(db_session, TEST_USER_ID, "Cats", True)

    def test_nothing_matches(self, db_session: Session, make_card) -> None:
        make_card()
        assert hierarchy_service.delete_node(db_session, TEST_USER_ID, ["Chemistry"]) == 0
        assert len(all_cards(db_session)) == 1
