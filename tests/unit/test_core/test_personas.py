"""
test_personas.py - Persona Store 테스트

검증 포인트:
1. `---` 세그먼트 분리 (3번째 생략 가능)
2. `key: value` 메타데이터 파싱
3. id = 파일명 stem, 형식 위반은 not found
4. 디렉토리 읽기 실패 → PersonaStoreError
"""

import logging
from pathlib import Path

import pytest

from src.core.personas import (
    PersonaStore,
    is_valid_persona_id,
    parse_metadata,
    parse_persona_record,
    split_record,
)
from src.domain.errors import ErrorCodes, PersonaNotFoundError, PersonaStoreError

# =============================================================================
# split_record 테스트
# =============================================================================


class TestSplitRecord:
    """split_record 함수 테스트."""

    def test_three_segments(self):
        """메타데이터 / 시스템 프롬프트 / 이미지 규칙."""
        meta, prompt, rule = split_record("name: A\n---\n prompt \n---\n rule \n")

        assert "name: A" in meta
        assert prompt == "prompt"
        assert rule == "rule"

    def test_missing_third_segment(self):
        """3번째 세그먼트 없음 → 빈 문자열."""
        _, prompt, rule = split_record("name: A\n---\nprompt only")

        assert prompt == "prompt only"
        assert rule == ""

    def test_metadata_only(self):
        """구분자 없음 → 프롬프트/규칙 모두 빈 문자열."""
        meta, prompt, rule = split_record("name: A")

        assert meta == "name: A"
        assert prompt == ""
        assert rule == ""

    def test_extra_segments_ignored(self):
        """4번째 이후 세그먼트는 무시."""
        _, prompt, rule = split_record("m\n---\np\n---\nr\n---\nextra")

        assert prompt == "p"
        assert rule == "r"


# =============================================================================
# parse_metadata 테스트
# =============================================================================


class TestParseMetadata:
    """parse_metadata 함수 테스트."""

    def test_key_value_lines(self):
        meta = parse_metadata("name: ピノ\nage: 3歳\n")

        assert meta == {"name": "ピノ", "age": "3歳"}

    def test_value_may_contain_colon(self):
        """첫 번째 `:` 기준 분리."""
        meta = parse_metadata("profileImage: http://example.com/a.jpg")

        assert meta["profileimage"] == "http://example.com/a.jpg"

    def test_keys_lowercased(self):
        meta = parse_metadata("Name: ピノ\nBIRTHPLACE: 北海道")

        assert meta["name"] == "ピノ"
        assert meta["birthplace"] == "北海道"

    def test_blank_and_malformed_lines_ignored(self):
        meta = parse_metadata("\nname: ピノ\njust text\n: no key\n")

        assert meta == {"name": "ピノ"}


# =============================================================================
# parse_persona_record 테스트
# =============================================================================


class TestParsePersonaRecord:
    """parse_persona_record 함수 테스트."""

    def test_full_record(self):
        text = (
            "id: pino\nname: ピノ\nprofileImage: images/pino.jpg\n"
            "gender: オス\nage: 3歳\nbirthplace: 北海道\n"
            "---\nシステム\n---\nルール\n"
        )

        persona = parse_persona_record("pino", text)

        assert persona.id == "pino"
        assert persona.name == "ピノ"
        assert persona.profile_image == "images/pino.jpg"
        assert persona.gender == "オス"
        assert persona.age == "3歳"
        assert persona.birthplace == "北海道"
        assert persona.system_prompt == "システム"
        assert persona.image_trigger_rule == "ルール"

    def test_name_falls_back_to_id(self):
        persona = parse_persona_record("tama", "gender: メス\n---\nprompt")

        assert persona.name == "tama"
        assert persona.profile_image == ""

    def test_id_mismatch_uses_file_stem(self, caplog):
        """메타데이터 id와 파일명이 다르면 경고 후 stem 사용."""
        with caplog.at_level(logging.WARNING):
            persona = parse_persona_record("pino", "id: other\nname: X\n---\np")

        assert persona.id == "pino"
        assert "mismatch" in caplog.text


class TestIsValidPersonaId:
    """id 형식 검사."""

    @pytest.mark.parametrize("persona_id", ["pino", "cat_01", "kuro-2"])
    def test_valid(self, persona_id):
        assert is_valid_persona_id(persona_id)

    @pytest.mark.parametrize("persona_id", ["", "../secret", "a/b", "pino.txt", "ピノ"])
    def test_invalid(self, persona_id):
        assert not is_valid_persona_id(persona_id)


# =============================================================================
# PersonaStore 테스트
# =============================================================================


class TestPersonaStore:
    """PersonaStore 테스트."""

    def test_list_ids_sorted_txt_only(self, persona_store: PersonaStore):
        assert persona_store.list_ids() == ["mike", "pino", "teto", "zorro"]

    def test_get_existing(self, persona_store: PersonaStore):
        persona = persona_store.get("pino")

        assert persona.name == "ピノ"
        assert "[IMAGE: images/pino/happy.jpg]" in persona.image_trigger_rule

    def test_get_without_third_segment(self, persona_store: PersonaStore):
        persona = persona_store.get("mike")

        assert persona.system_prompt
        assert persona.image_trigger_rule == ""

    def test_get_unknown(self, persona_store: PersonaStore):
        with pytest.raises(PersonaNotFoundError) as exc_info:
            persona_store.get("tama")

        assert exc_info.value.code == ErrorCodes.PERSONA_NOT_FOUND

    def test_get_path_traversal_is_not_found(self, persona_store: PersonaStore, tmp_path: Path):
        """경로 탈출 id는 파일 존재 여부와 무관하게 not found."""
        (tmp_path / "secret.txt").write_text("name: secret", encoding="utf-8")

        with pytest.raises(PersonaNotFoundError):
            persona_store.get("../secret")

    def test_get_undecodable_file(self, persona_dir: Path, persona_store: PersonaStore):
        (persona_dir / "broken.txt").write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(PersonaStoreError) as exc_info:
            persona_store.get("broken")

        assert exc_info.value.code == ErrorCodes.PERSONA_READ_FAILED

    def test_load_all_skips_broken(self, persona_dir: Path, persona_store: PersonaStore):
        (persona_dir / "broken.txt").write_bytes(b"\xff\xfe\xfa")

        ids = [p.id for p in persona_store.load_all()]

        assert ids == ["mike", "pino", "teto", "zorro"]

    def test_missing_directory(self, tmp_path: Path):
        store = PersonaStore(tmp_path / "nope")

        with pytest.raises(PersonaStoreError) as exc_info:
            store.list_ids()

        assert exc_info.value.code == ErrorCodes.PERSONA_DIR_UNREADABLE

    def test_reads_from_disk_every_call(self, persona_dir: Path, persona_store: PersonaStore):
        """캐시 없음: 파일 변경이 바로 반영."""
        assert persona_store.get("pino").name == "ピノ"

        (persona_dir / "pino.txt").write_text("name: ピノ2\n---\np", encoding="utf-8")

        assert persona_store.get("pino").name == "ピノ2"

    def test_repository_data_records_parse(self, project_root: Path):
        """저장소의 data/ 레코드가 모두 파싱됨."""
        store = PersonaStore(project_root / "data")

        personas = store.load_all()

        assert {p.id for p in personas} >= {"pino", "teto", "mike", "kuro"}
        assert all(p.system_prompt for p in personas)
