"""
Term catalogs - read-only reference tables shared by the extractor and classifier.

All tables are module-level tuples / mapping proxies compiled once at import.
Matching is literal substring matching (no word boundaries), so ``"ai"``
also matches inside ``"maintain"``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType

from research_organizer.domain.entities.classification import Category

# =============================================================================
# Keyword extraction catalogs
# =============================================================================

TECHNICAL_TERM_GROUPS: tuple[str, ...] = (
    r"AI|人工知能|機械学習|深層学習|ディープラーニング|neural network",
    r"システム|system|アーキテクチャ|architecture",
    r"データ|data|分析|analysis|処理|processing",
    r"アルゴリズム|algorithm|最適化|optimization",
    r"インターフェース|interface|UI|UX|ユーザビリティ",
    r"プログラミング|programming|開発|development",
    r"クラウド|cloud|サーバー|server|インフラ",
    r"セキュリティ|security|暗号化|encryption",
    r"データベース|database|SQL|NoSQL",
    r"Web|ウェブ|API|REST|GraphQL",
)

RESEARCH_TERM_GROUPS: tuple[str, ...] = (
    r"研究|research|調査|study|実験|experiment",
    r"手法|method|アプローチ|approach|技法",
    r"評価|evaluation|測定|measurement|指標",
    r"比較|comparison|分析|analysis|検証",
    r"提案|proposal|改善|improvement|効率",
    r"モデル|model|フレームワーク|framework",
    r"パフォーマンス|performance|効果|effectiveness",
    r"イノベーション|innovation|新規性|novelty",
)

TECHNICAL_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(group, re.IGNORECASE) for group in TECHNICAL_TERM_GROUPS
)
RESEARCH_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(group, re.IGNORECASE) for group in RESEARCH_TERM_GROUPS
)

# Katakana runs of 3+ or Latin words of 4+ letters
SPECIAL_TERM_PATTERN = re.compile(r"[ァ-ヶー]{3,}|[a-zA-Z]{4,}")
SPECIAL_TERM_MIN_LENGTH = 4
SPECIAL_TERM_MAX_LENGTH = 15

# =============================================================================
# Classification catalogs
# =============================================================================

CATEGORY_TERMS: MappingProxyType[Category, tuple[str, ...]] = MappingProxyType({
    Category.MAIN: (
        "目的", "目標", "概要", "overview", "main", "全体", "方向性", "戦略",
        "プロジェクト", "project", "計画", "plan", "構想", "vision", "基本",
        "basic", "根本", "fundamental", "核心", "core",
    ),
    Category.TOPIC: (
        "トピック", "topic", "項目", "item", "課題", "issue", "論点", "分岐",
        "選択肢", "option", "候補", "candidate", "案", "idea", "リスト", "list",
        "一覧", "種類", "type", "category",
    ),
    Category.FOR_TECH: (
        "技術", "technology", "tech", "実装", "implementation", "開発",
        "development", "プログラミング", "programming", "コード", "code",
        "システム", "system", "アーキテクチャ", "architecture", "データベース",
        "database", "api", "フレームワーク", "framework", "ライブラリ", "library",
        "サーバー", "server", "クラウド", "cloud", "インフラ", "infrastructure",
        "セキュリティ", "security", "パフォーマンス", "performance", "バグ", "bug",
        "デバッグ", "debug", "テスト", "test", "デプロイ", "deploy", "バージョン",
        "version",
    ),
    Category.FOR_ACA: (
        "学術", "academic", "研究", "research", "論文", "paper", "文献",
        "literature", "理論", "theory", "仮説", "hypothesis", "実験", "experiment",
        "分析", "analysis", "調査", "survey", "手法", "method", "手順", "procedure",
        "結果", "result", "考察", "discussion", "結論", "conclusion", "引用",
        "citation", "参考", "reference", "学会", "conference", "ジャーナル",
        "journal", "査読", "peer review", "統計", "statistics", "データ", "data",
        "評価", "evaluation", "検証", "verification", "先行研究", "関連研究",
        "related work", "新規性", "novelty", "貢献", "contribution",
    ),
})

# Filename substrings that hint at a category (medium bonus)
FILENAME_HINTS: MappingProxyType[Category, tuple[str, ...]] = MappingProxyType({
    Category.MAIN: ("main", "概要", "overview"),
    Category.TOPIC: ("topic", "トピック", "分岐", "項目"),
    Category.FOR_TECH: ("tech", "技術", "実装", "開発"),
    Category.FOR_ACA: ("academic", "学術", "研究", "論文"),
})

# Exact canonical filename marker (large bonus): "<marker>", "<marker>.md", "<marker>.txt"
CANONICAL_MARKERS: MappingProxyType[Category, str] = MappingProxyType({
    Category.MAIN: "main",
    Category.TOPIC: "topic",
    Category.FOR_TECH: "fortech",
    Category.FOR_ACA: "foraca",
})
CANONICAL_SUFFIXES: tuple[str, ...] = ("", ".md", ".txt")


@dataclass(frozen=True, slots=True)
class BonusTable:
    """Evidence weights for one category."""

    exact_name: float
    name_hint: float
    terms_high: float  # >= 5 term hits
    terms_medium: float  # >= 3
    terms_low: float  # >= 1
    structure: float


BONUS_TABLES: MappingProxyType[Category, BonusTable] = MappingProxyType({
    Category.MAIN: BonusTable(0.8, 0.4, 0.5, 0.5, 0.2, 0.2),
    Category.TOPIC: BonusTable(0.8, 0.4, 0.4, 0.4, 0.2, 0.3),
    Category.FOR_TECH: BonusTable(0.8, 0.4, 0.6, 0.4, 0.2, 0.3),
    Category.FOR_ACA: BonusTable(0.8, 0.4, 0.6, 0.4, 0.2, 0.2),
})

TERM_TIER_HIGH = 5
TERM_TIER_MEDIUM = 3
TERM_TIER_LOW = 1

LIST_MARKER_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^[-*+]\s", re.MULTILINE),
    re.compile(r"^\d+\.\s", re.MULTILINE),
)
LIST_MARKER_MIN_COUNT = 3

CODE_MARKERS: tuple[str, ...] = ("```", "function", "class")
ABSTRACT_MARKERS: tuple[str, ...] = ("abstract", "要約", "introduction")

INCLUDE_THRESHOLD = 0.2
SECONDARY_THRESHOLD = 0.1
MIN_CONFIDENCE = 0.15
SECONDARY_CANDIDATES = 2

# Keyword scoring
MAIN_DOCUMENT_WEIGHT = 1.5
DEFAULT_DOCUMENT_WEIGHT = 1.0
DEFAULT_TOP_K = 10
