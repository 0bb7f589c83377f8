from __future__ import annotations

import pytest
from sqlalchemy import insert, select
from sqlalchemy.orm import Session

from inheritance import DeclarationError, MissingParentError, RecordInvalid, lifecycle
from models import Book, Ebook, Product, Review, Video


def test_saving_child_persists_parent_row(db_session: Session) -> None:
    book = Book(name="Agile Web Development with Rails", author="Dave Thomas", price=39.5)
    db_session.add(book)
    db_session.flush()

    assert book.id is not None
    assert book.product.id is not None
    assert book.product_id == book.product.id

    row = db_session.execute(
        select(Product.name, Product.price, Product.type).where(Product.id == book.product_id)
    ).one()
    assert tuple(row) == ("Agile Web Development with Rails", 39.5, "Book")


def test_updating_delegated_field_updates_parent_row(db_session: Session) -> None:
    video = Video(name="Twilight Zone", actors="Rod Serling")
    db_session.add(video)
    db_session.flush()

    video.name = "Twilight Zone Season 1"
    db_session.flush()

    stored = db_session.execute(select(Product.name).where(Product.id == video.product_id)).scalar_one()
    assert stored == "Twilight Zone Season 1"


def test_parent_validation_errors_are_copied_to_child() -> None:
    book = Book(author="Anonymous")
    book.name = ""

    assert book.validate() is False
    assert ("name", "can't be blank") in list(book.errors)
    assert book.errors["name"] == ["can't be blank"]
    assert book.product.errors["name"] == ["can't be blank"]


def test_child_without_parent_yet_is_valid() -> None:
    book = Book(author="Anonymous")

    assert book.is_valid
    assert book.product is None


def test_flush_rejects_child_whose_parent_is_invalid(db_session: Session) -> None:
    book = Book(author="Anonymous")
    db_session.add(book)

    with pytest.raises(RecordInvalid) as excinfo:
        db_session.flush()

    assert ("name", "can't be blank") in excinfo.value.errors
    assert book.product is not None, "parent should be materialised before validation"
    assert book.product.type == "Book"


def test_create_builder_persists_through_parent(db_session: Session) -> None:
    book = Book(name="Clean Code")
    db_session.add(book)

    review = book.create_reviews(body="Opinionated", rating=4)

    assert isinstance(review, Review)
    assert review.id is not None
    assert review.product_id == book.product.id
    assert book.id is not None


def test_parent_finds_its_subobject(db_session: Session) -> None:
    book = Book(name="SICP")
    video = Video(name="Lectures", actors="Abelson, Sussman")
    db_session.add_all([book, video])
    db_session.flush()

    assert book.product.subobject is book
    assert video.product.subobject is video


def test_subclass_of_child_is_found_as_subobject(db_session: Session) -> None:
    ebook = Ebook(name="Dune", author="Frank Herbert", file_format="epub")
    db_session.add(ebook)
    db_session.flush()

    assert ebook.product.type == "Ebook"
    assert ebook.product.subobject is ebook


def test_subobject_uses_discriminator_recorded_at_declaration(
    settings_env: pytest.MonkeyPatch, db_session: Session
) -> None:
    book = Book(name="SICP")
    db_session.add(book)
    db_session.flush()

    settings_env.setenv("INHERITS_FROM_DISCRIMINATOR", "subtype")

    assert book.product.subobject is book


def test_subobject_is_empty_without_discriminator(db_session: Session) -> None:
    product = Product(name="Loose item")
    db_session.add(product)
    db_session.flush()

    assert product.subobject is None


def test_subobject_rejects_unknown_discriminator(db_session: Session) -> None:
    product = Product(name="Mystery", type="Spaceship")
    db_session.add(product)
    db_session.flush()

    with pytest.raises(DeclarationError):
        product.subobject


def test_persisted_child_without_parent_raises(db_session: Session) -> None:
    result = db_session.execute(insert(Book.__table__).values(author="Orphan"))
    orphan = db_session.get(Book, result.inserted_primary_key[0])

    with pytest.raises(MissingParentError):
        orphan.name


def test_flush_skips_validation_when_disabled(settings_env: pytest.MonkeyPatch, db_session: Session) -> None:
    settings_env.setenv("INHERITS_FROM_VALIDATE_ON_FLUSH", "false")
    calls = []
    settings_env.setattr(lifecycle, "validate_records", lambda session: calls.append(session))
    product = Product(name="   ")
    db_session.add(product)

    db_session.flush()

    assert calls == []
    assert product.id is not None
    assert product.validate() is False
