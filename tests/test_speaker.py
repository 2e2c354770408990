"""화자 귀속(speaker/)의 단위 테스트입니다."""

from __future__ import annotations

import pytest

from chat_recon.config import AttributionConfig
from chat_recon.models import (
    AttributedLine,
    BoundingBox,
    RawLine,
    ScreenZone,
    Speaker,
    SpeakerKind,
)
from chat_recon.speaker import (
    NamedSpeakerDetector,
    SpeakerAttributor,
    classify_ownership,
    lexical_vote,
    position_vote,
    screen_zone,
    time_vote,
)

WIDTH = 1000


@pytest.fixture
def attributor():
    return SpeakerAttributor(AttributionConfig())


def _attributed(text: str, speaker: Speaker, is_label: bool = False) -> AttributedLine:
    return AttributedLine(line=RawLine(text), text=text, speaker=speaker, is_label=is_label)


# ---------------------------------------------------------------------------
# 신호
# ---------------------------------------------------------------------------


class TestScreenZone:

    @pytest.mark.parametrize("box, expected", [
        (BoundingBox(20, 0, 220, 30), ScreenZone.LEFT),
        (BoundingBox(400, 0, 600, 30), ScreenZone.CENTER),
        (BoundingBox(780, 0, 980, 30), ScreenZone.RIGHT),
    ])
    def test_박스_중심_영역(self, box, expected):
        assert screen_zone(box, WIDTH) is expected

    def test_박스_없음(self):
        assert screen_zone(None, WIDTH) is None

    def test_화면_너비_없음(self):
        assert screen_zone(BoundingBox(20, 0, 220, 30), None) is None

    @pytest.mark.parametrize("box", [
        BoundingBox(100, 0, 100, 30),   # 너비 0
        BoundingBox(100, 30, 200, 10),  # 높이 음수
        BoundingBox(-10, 0, 100, 30),   # 화면 왼쪽 밖
        BoundingBox(900, 0, 1200, 30),  # 화면 오른쪽 밖
    ])
    def test_잘못된_박스는_없는_것으로_취급(self, box):
        assert screen_zone(box, WIDTH) is None

    def test_position_vote_영역과_화자(self):
        zone, speaker = position_vote(BoundingBox(780, 0, 980, 30), WIDTH)
        assert zone is ScreenZone.RIGHT
        assert speaker == Speaker.self_()


class TestLexicalVote:

    @pytest.mark.parametrize("text, expected", [
        ("내가 갈게", Speaker.self_()),
        ("나는 좋지", Speaker.self_()),
        ("우리 내일 봐", Speaker.self_()),
        ("너 언제 와", Speaker.counterpart()),
        ("어디서 만나", Speaker.counterpart()),
        ("홍길동님이 입장했습니다", Speaker.system()),
    ])
    def test_어휘_묶음_판정(self, text, expected):
        assert lexical_vote(text) == expected

    def test_단어_안의_나는_무시(self):
        """'나중'이나 '하나'의 '나'는 대명사로 보지 않습니다."""
        assert lexical_vote("나중에 하나 사자") is None

    def test_동점이면_기권(self):
        assert lexical_vote("내가 언제") is None

    def test_일치_없음(self):
        assert lexical_vote("밥 먹자") is None


class TestTimeVote:

    def test_시각이_있으면_상대방(self):
        assert time_vote("3:30에 보자") == Speaker.counterpart()
        assert time_vote("오후 4:43 도착") == Speaker.counterpart()

    def test_시각이_없으면_기권(self):
        assert time_vote("내일 보자") is None


# ---------------------------------------------------------------------------
# 소유권 / 이름 라벨
# ---------------------------------------------------------------------------


class TestOwnership:

    @pytest.mark.parametrize("text", ["네", "응", "알겠어", "알겠어요", "좋아", "그래 괜찮아요", "내일 안가도 되잖아"])
    def test_나의_표현(self, text):
        assert classify_ownership(text) == Speaker.self_()

    @pytest.mark.parametrize("text", [
        "엄마가 가려고 약속했어",
        "그거 왜 물어보는거야",
        "이따 연락할게",
        "이것 좀 해줘",
        "한번 해봐",
        "이거 어때?",
        "내일 뭐 할거야",
    ])
    def test_상대방_표현(self, text):
        assert classify_ownership(text) == Speaker.counterpart()

    def test_부분_일치는_무시(self):
        """줄 전체가 일치해야 하므로 '네이버'는 '네'로 보지 않습니다."""
        assert classify_ownership("네이버") is None

    def test_일치_없음(self):
        assert classify_ownership("아무거나") is None


class TestNamedSpeakerDetector:

    def test_호칭_감지(self):
        detector = NamedSpeakerDetector(["엄마", "선생님"])
        assert detector.detect("엄마") == "엄마"
        assert detector.detect("선생님 안녕하세요") == "선생님"

    def test_긴_줄은_라벨이_아님(self):
        detector = NamedSpeakerDetector(["엄마"], max_length=15)
        assert detector.detect("엄마가 오늘 저녁에 조금 늦게 들어온다고 했어요") is None

    def test_이름과_본문_분리(self):
        detector = NamedSpeakerDetector(["엄마"])
        assert detector.split("엄마 밥 먹었어?") == ("엄마", "밥 먹었어?")
        assert detector.split("엄마") == ("엄마", "")

    @pytest.mark.parametrize("text", ["← 엄마", "-> 엄마", "• 엄마", "엄마:", "  엄마  "])
    def test_화살표_불릿_콜론이_붙은_라벨(self, text):
        assert NamedSpeakerDetector(["엄마"]).detect(text) == "엄마"

    @pytest.mark.parametrize("text", [
        "친구랑 영화 봤어",
        "형이 그러는데 괜찮대",
        "우리 엄마 최고",
        "오늘 선생님 오셔?",
    ])
    def test_문장_안의_호칭은_라벨이_아님(self, text):
        detector = NamedSpeakerDetector(["엄마", "친구", "형", "선생님"])
        assert detector.detect(text) is None
        assert detector.split(text) is None


# ---------------------------------------------------------------------------
# SpeakerAttributor.attribute
# ---------------------------------------------------------------------------


class TestAttribute:

    def test_오른쪽은_나(self, attributor, right_line):
        result = attributor.attribute(right_line("토요일 오후에 가능합니다"), screen_width=WIDTH)
        assert result.speaker == Speaker.self_()
        assert result.signals.zone is ScreenZone.RIGHT
        assert result.signals.votes == {SpeakerKind.SELF: 3}

    def test_왼쪽은_상대방(self, attributor, left_line):
        result = attributor.attribute(left_line("주말에 시간 괜찮으세요"), screen_width=WIDTH)
        assert result.speaker == Speaker.counterpart()

    def test_가운데는_시스템(self, attributor, make_line):
        line = make_line("사진을 보냈습니다", box=(400, 0, 600, 30))
        assert attributor.attribute(line, screen_width=WIDTH).speaker == Speaker.system()

    def test_위치_가중치가_어휘보다_큼(self, attributor, left_line):
        result = attributor.attribute(left_line("내가 할게"), screen_width=WIDTH)
        assert result.speaker == Speaker.counterpart()
        assert result.signals.votes == {SpeakerKind.COUNTERPART: 3, SpeakerKind.SELF: 2}

    def test_최고점_동점이면_미분류(self, attributor, right_line):
        """위치(나 3)와 어휘+시간(상대방 2+1)이 같으면 UNKNOWN입니다."""
        result = attributor.attribute(right_line("언제 와 3:30"), screen_width=WIDTH)
        assert result.speaker == Speaker.unknown()
        assert result.signals.fallback is False

    def test_소유권_재정의가_위치를_이김(self, attributor, right_line):
        result = attributor.attribute(right_line("이따 연락할게"), screen_width=WIDTH)
        assert result.speaker == Speaker.counterpart()
        assert result.signals.override == Speaker.counterpart()
        assert result.signals.override_conflict is True
        assert "conflicts" in result.signals.describe()

    def test_위치와_일치하는_재정의는_충돌_아님(self, attributor, right_line):
        result = attributor.attribute(right_line("알겠어요"), screen_width=WIDTH)
        assert result.speaker == Speaker.self_()
        assert result.signals.override_conflict is False

    def test_이름_라벨_줄(self, attributor):
        result = attributor.attribute(RawLine("엄마"))
        assert result.is_label is True
        assert result.speaker == Speaker.named("엄마")
        assert result.text == ""
        assert result.signals.describe() == "named:엄마"

    def test_이름과_본문이_같은_줄(self, attributor):
        result = attributor.attribute(RawLine("엄마 밥 먹었어?"))
        assert result.speaker == Speaker.named("엄마")
        assert result.text == "밥 먹었어?"

    def test_호칭이_섞인_문장은_그대로_유지(self, attributor):
        result = attributor.attribute(RawLine("친구랑 영화 봤어"))
        assert result.is_label is False
        assert result.speaker.kind is not SpeakerKind.NAMED_COUNTERPART
        assert result.text == "친구랑 영화 봤어"

    def test_신호가_없으면_교대(self, attributor):
        prior = [_attributed("저녁 먹자", Speaker.self_())]
        result = attributor.attribute(RawLine("좋은 생각이다"), prior)
        assert result.speaker == Speaker.counterpart()
        assert result.signals.fallback is True

    def test_가중치_0인_신호는_투표하지_않음(self, right_line):
        attributor = SpeakerAttributor(AttributionConfig(position_weight=0))
        result = attributor.attribute(right_line("아무 말이나"), screen_width=WIDTH)
        assert result.signals.fallback is True
        assert result.speaker == Speaker.self_()

    def test_잘못된_박스는_위치_신호_없음(self, attributor, make_line):
        line = make_line("저녁 먹자", box=(900, 0, 1200, 30))
        result = attributor.attribute(line, screen_width=WIDTH)
        assert result.signals.zone is None
        assert result.signals.fallback is True


class TestAlternate:

    def test_이전_줄_없으면_나(self):
        assert SpeakerAttributor._alternate([]) == Speaker.self_()

    def test_라벨_다음은_상대방(self):
        prior = [_attributed("", Speaker.named("엄마"), is_label=True)]
        assert SpeakerAttributor._alternate(prior) == Speaker.counterpart()

    def test_이름_있는_상대방_다음은_나(self):
        prior = [_attributed("밥 먹었어?", Speaker.named("엄마"))]
        assert SpeakerAttributor._alternate(prior) == Speaker.self_()

    def test_시스템과_미분류_줄은_건너뜀(self):
        prior = [
            _attributed("저녁 먹자", Speaker.self_()),
            _attributed("홍길동님이 입장했습니다", Speaker.system()),
            _attributed("언제 와 3:30", Speaker.unknown()),
        ]
        assert SpeakerAttributor._alternate(prior) == Speaker.counterpart()


# ---------------------------------------------------------------------------
# SpeakerAttributor.attribute_all / 화면 너비
# ---------------------------------------------------------------------------


class TestAttributeAll:

    def test_박스_없는_두_줄은_나_다음_상대방(self, attributor):
        result = attributor.attribute_all([RawLine("밥은 먹었어"), RawLine("아직 안 먹었지")])
        assert [r.speaker for r in result] == [Speaker.self_(), Speaker.counterpart()]

    def test_결정적_결과(self, attributor, left_line, right_line):
        lines = [left_line("주말에 시간 괜찮으세요"), right_line("토요일 오후에 가능합니다", 50)]
        assert attributor.attribute_all(lines) == attributor.attribute_all(lines)

    def test_귀속할_수_없는_짧은_줄_제외(self, right_line):
        attributor = SpeakerAttributor(AttributionConfig(position_weight=2))
        result = attributor.attribute_all([right_line("뭐야")], screen_width=WIDTH)
        assert result == []

    def test_긴_미분류_줄은_유지(self, attributor, right_line):
        result = attributor.attribute_all([right_line("언제 와 3:30")], screen_width=WIDTH)
        assert [r.speaker for r in result] == [Speaker.unknown()]

    def test_라벨_줄은_짧아도_유지(self, attributor):
        result = attributor.attribute_all([RawLine("형")])
        assert result[0].is_label is True


class TestScreenWidth:

    def test_박스에서_추정(self, left_line, right_line):
        lines = [left_line("가나다라"), right_line("마바사아")]
        assert SpeakerAttributor.infer_screen_width(lines) == 980.0

    def test_박스가_없으면_None(self):
        assert SpeakerAttributor.infer_screen_width([RawLine("가나다라")]) is None

    def test_우선순위_인자_설정_추정_옵션(self, right_line):
        lines = [right_line("마바사아")]
        configured = SpeakerAttributor(AttributionConfig(screen_width=1080))
        assert configured.resolve_screen_width(lines, 720) == 720.0
        assert configured.resolve_screen_width(lines) == 1080.0
        inferring = SpeakerAttributor(AttributionConfig(infer_screen_width=True))
        assert inferring.resolve_screen_width(lines) == 980.0

    def test_너비를_모르면_추정하지_않음(self, right_line):
        lines = [right_line("마바사아")]
        assert SpeakerAttributor(AttributionConfig()).resolve_screen_width(lines) is None

    def test_너비_없이_박스만_있으면_위치_신호_없음(self, attributor, left_line):
        """왼쪽 말풍선만 있어도 가운데(시스템)로 잘못 투표하지 않습니다."""
        result = attributor.attribute_all([left_line("주말에 시간 괜찮으세요")])
        assert result[0].signals.zone is None
        assert result[0].signals.position is None
        assert result[0].speaker != Speaker.system()
