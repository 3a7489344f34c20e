import logging

import pytest

from newsbayes.estimator import (
    ProportionTable,
    build_proportion_table,
    class_prior,
    conditional_proportion,
    partition,
)
from newsbayes.model import (
    ClassificationResult,
    NaiveBayesClassifier,
    classify,
    classify_record,
    classify_values,
    decide,
    partial_score,
)
from newsbayes.records import (
    DEFAULT_LABELS,
    MODELED_ATTRIBUTES,
    UNKNOWN,
    FeatureVector,
    InvalidLabel,
    LabeledExample,
)


# -------------------------
# Fixtures
# -------------------------

def article(source_trust, length_bucket, keyword_density):
    return FeatureVector(source_trust, length_bucket, UNKNOWN, UNKNOWN, UNKNOWN, keyword_density)


@pytest.fixture
def sample_examples():
    # One genuine article and two fake ones
    return [
        LabeledExample(article("trusted", "average", "rare"), "true"),
        LabeledExample(article("trusted", "long", "common"), "false"),
        LabeledExample(article("unreliable", "long", "common"), "false"),
    ]


@pytest.fixture
def sample_table(sample_examples):
    return build_proportion_table(sample_examples)


# -------------------------
# Tests for records.py
# -------------------------

def test_feature_vector_defaults_to_unknown():
    vector = FeatureVector()
    assert vector.to_row() == (UNKNOWN,) * 6


def test_feature_vector_attribute_order():
    assert FeatureVector.attribute_names() == (
        "source_trust", "length_bucket", "headline", "date_published", "author", "keyword_density"
    )


def test_feature_vector_from_row_blank_cells():
    vector = FeatureVector.from_row(["trusted", "", "standard", " ", "unreliable", "rare"])
    assert vector.length_bucket == UNKNOWN
    assert vector.date_published == UNKNOWN
    assert vector.author == "unreliable"


def test_feature_vector_from_row_wrong_length():
    with pytest.raises(ValueError):
        FeatureVector.from_row(["trusted", "long"])


def test_feature_vector_dict_conversion():
    vector = FeatureVector.from_dict({"source_trust": "trusted", "keyword_density": "common"})
    assert vector.to_dict()["source_trust"] == "trusted"
    assert vector.to_dict()["headline"] == UNKNOWN
    with pytest.raises(ValueError):
        FeatureVector.from_dict({"word_count": "long"})


def test_feature_vector_is_immutable():
    vector = FeatureVector()
    with pytest.raises(AttributeError):
        vector.source_trust = "trusted"


def test_value_of_unknown_attribute():
    with pytest.raises(ValueError):
        FeatureVector().value_of("url")


def test_labeled_example_rejects_invalid_label():
    with pytest.raises(InvalidLabel) as excinfo:
        LabeledExample(FeatureVector(), "fake")
    assert excinfo.value.label == "fake"
    assert isinstance(excinfo.value, ValueError)


def test_labeled_example_custom_labels():
    example = LabeledExample(FeatureVector(), "fake", labels=("fake", "real"))
    assert example.label == "fake"


def test_unrecognized_values_are_accepted():
    vector = FeatureVector(source_trust="sketchy")
    assert vector.source_trust == "sketchy"


# -------------------------
# Tests for estimator.py
# -------------------------

def test_partition(sample_examples):
    fake, genuine = partition(sample_examples)
    assert len(fake) == 2
    assert len(genuine) == 1
    assert all(example.label == "false" for example in fake)


def test_partition_drops_unrecognized_labels(sample_examples, caplog):
    stray = LabeledExample(FeatureVector(), "fake", labels=("fake", "real"))
    with caplog.at_level(logging.WARNING):
        fake, genuine = partition(sample_examples + [stray])
    assert len(fake) + len(genuine) == 3
    assert "Excluded 1 example" in caplog.text


def test_class_prior(sample_examples):
    fake, genuine = partition(sample_examples)
    assert class_prior(fake, 3) == pytest.approx(2 / 3)
    assert class_prior(genuine, 3) == pytest.approx(1 / 3)


def test_class_prior_zero_total():
    assert class_prior([], 0) == 0.0


def test_conditional_proportion(sample_examples):
    fake, genuine = partition(sample_examples)
    assert conditional_proportion(fake, "source_trust", "trusted") == 0.5
    assert conditional_proportion(fake, "length_bucket", "long") == 1.0
    assert conditional_proportion(fake, "length_bucket", "average") == 0.0
    assert conditional_proportion(genuine, "keyword_density", "rare") == 1.0


def test_conditional_proportion_empty_class():
    assert conditional_proportion([], "source_trust", "trusted") == 0.0


def test_conditional_proportion_unknown_value_matches_nothing(sample_examples):
    fake, _ = partition(sample_examples)
    assert conditional_proportion(fake, "source_trust", "sketchy") == 0.0


def test_priors_sum_to_one(sample_table):
    assert sample_table.prior("false") + sample_table.prior("true") == pytest.approx(1.0)


def test_conditionals_sum_to_one_without_unknowns(sample_table):
    for attribute, values in MODELED_ATTRIBUTES:
        for label in DEFAULT_LABELS:
            total = sum(sample_table.conditional(attribute, value, label) for value in values)
            assert total == pytest.approx(1.0)


def test_conditionals_sum_below_one_with_unknowns(sample_examples):
    examples = sample_examples + [LabeledExample(article("trusted", UNKNOWN, "common"), "false")]
    table = build_proportion_table(examples)
    total = sum(table.conditional("length_bucket", value, "false") for value in ("short", "average", "long"))
    assert total == pytest.approx(2 / 3)
    assert total < 1.0


def test_unmodeled_attributes_are_inert(sample_examples):
    table = build_proportion_table(sample_examples)
    assert [attribute for attribute, _ in table.modeled_attributes] == [
        "source_trust", "length_bucket", "keyword_density"
    ]
    with pytest.raises(ValueError):
        table.conditional("headline", "standard", "false")


def test_table_lookup_of_unknown_value(sample_table):
    assert sample_table.conditional("source_trust", UNKNOWN, "false") == 0.0
    assert sample_table.conditional("source_trust", "sketchy", "true") == 0.0


def test_table_is_read_only(sample_table):
    with pytest.raises(TypeError):
        sample_table.priors["false"] = 1.0
    with pytest.raises(TypeError):
        sample_table.conditionals["source_trust"]["trusted"]["false"] = 1.0


def test_empty_training_set():
    table = build_proportion_table([])
    assert table.total == 0
    assert table.prior("false") == 0.0
    assert table.prior("true") == 0.0
    for attribute, values in MODELED_ATTRIBUTES:
        for value in values:
            for label in DEFAULT_LABELS:
                assert table.conditional(attribute, value, label) == 0.0

    result = classify_record(table, article("trusted", "long", "common"))
    assert result.score == 1.0
    assert result.label == "false"


def test_table_to_dict_from_dict(sample_table):
    data = sample_table.to_dict()
    assert data["class_counts"] == {"false": 2, "true": 1}
    restored = ProportionTable.from_dict(data)
    assert restored.to_dict() == data
    assert restored.labels == ("false", "true")


def test_table_from_dict_missing_key(sample_table):
    data = sample_table.to_dict()
    del data["priors"]
    with pytest.raises(ValueError):
        ProportionTable.from_dict(data)


# -------------------------
# Tests for model.py
# -------------------------

def test_partial_score():
    assert partial_score(0.5, [0.5, 0.5, 1.0]) == 0.125
    assert partial_score(0.5, []) == 0.5


def test_classify_class_a_zero():
    assert classify(0.0, [1.0, 1.0, 1.0], 0.5, [0.5, 0.5, 0.5]) == 1.0
    # Class A takes precedence even when both are zero
    assert classify(0.0, [0.0], 0.0, [0.0]) == 1.0


def test_classify_class_b_zero():
    assert classify(0.5, [0.5, 0.5, 0.5], 0.5, [0.0, 1.0, 1.0]) == 0.0


def test_classify_literal_formula():
    # scoreA = 0.0625, scoreB = 0.125; literal formula reduces to 1 / scoreB
    score = classify(0.5, [0.5, 0.5, 0.5], 0.5, [0.25, 1.0, 1.0])
    assert score == pytest.approx(8.0)


def test_classify_normalized_formula():
    score = classify(0.5, [0.5, 0.5, 0.5], 0.5, [0.25, 1.0, 1.0], formula="normalized")
    assert score == pytest.approx(1 / 3)


def test_classify_unknown_formula():
    with pytest.raises(ValueError):
        classify(0.5, [0.5], 0.5, [0.5], formula="bayes")


def test_classify_is_idempotent():
    args = (2 / 3, [0.5, 1.0, 1.0], 1 / 3, [1.0, 0.5, 0.25])
    assert classify(*args) == classify(*args)


def test_decide():
    assert decide(0.49) == "true"
    assert decide(0.5) == "false"
    assert decide(8.0) == "false"
    assert decide(0.7, threshold=0.75) == "true"
    assert decide(0.2, labels=("fake", "real")) == "real"


def test_mismatched_lookup_example(sample_table):
    # Lookup with average/rare although the article itself is long/common
    assert sample_table.prior("false") == pytest.approx(2 / 3)
    assert sample_table.prior("true") == pytest.approx(1 / 3)
    assert sample_table.conditional("length_bucket", "average", "false") == 0.0

    result = classify_values(
        sample_table,
        {"source_trust": "trusted", "length_bucket": "average", "keyword_density": "rare"}
    )
    assert result.class_a_score == 0.0
    assert result.score == 1.0
    assert result.label == "false"
    assert result.is_fake
    assert result.is_degenerate


def test_classify_record_uses_query_values(sample_table):
    query = article("trusted", "long", "common")
    result = classify_record(sample_table, query)
    assert result.evidence == {"source_trust": "trusted", "length_bucket": "long", "keyword_density": "common"}
    # Genuine articles never had long/common, so class B scores zero
    assert result.class_a_score == pytest.approx(1 / 3)
    assert result.class_b_score == 0.0
    assert result.score == 0.0
    assert result.label == "true"
    assert result.is_genuine


def test_classify_record_ignores_unmodeled_attributes(sample_table):
    plain = article("trusted", "long", "common")
    decorated = FeatureVector("trusted", "long", "unusual", "high", "unreliable", "common")
    assert classify_record(sample_table, plain).score == classify_record(sample_table, decorated).score


def test_classify_values_missing_attribute(sample_table):
    with pytest.raises(ValueError):
        classify_values(sample_table, {"source_trust": "trusted"})


def test_classification_result_polarity():
    result = ClassificationResult(score=0.2, label="true")
    assert result.is_genuine
    assert not result.is_fake
    assert not result.is_degenerate


def test_naive_bayes_classifier(sample_examples):
    classifier = NaiveBayesClassifier(formula="normalized")
    assert not classifier.is_fitted
    with pytest.raises(RuntimeError):
        classifier.predict(FeatureVector())

    classifier.fit(sample_examples)
    results = classifier.predict_many([article("trusted", "average", "rare"), FeatureVector()])
    assert [r.formula for r in results] == ["normalized", "normalized"]
    # Genuine-looking article: scoreA is zero, so the fake branch wins
    assert results[0].score == 1.0
    # All-unknown article matches nothing in either class
    assert results[1].score == 1.0


def test_naive_bayes_classifier_rejects_unknown_formula():
    with pytest.raises(ValueError):
        NaiveBayesClassifier(formula="bayes")


def test_naive_bayes_classifier_non_degenerate():
    examples = [
        LabeledExample(article("unreliable", "short", "common"), "false"),
        LabeledExample(article("trusted", "short", "common"), "false"),
        LabeledExample(article("trusted", "long", "common"), "true"),
        LabeledExample(article("trusted", "short", "rare"), "true"),
    ]
    query = article("trusted", "short", "common")

    literal = NaiveBayesClassifier().fit(examples).predict(query)
    normalized = NaiveBayesClassifier(formula="normalized").fit(examples).predict(query)

    # scoreA = 0.5 * 0.5 * 1 * 1 = 0.25, scoreB = 0.5 * 1 * 0.5 * 0.5 = 0.125
    assert literal.class_a_score == pytest.approx(0.25)
    assert literal.class_b_score == pytest.approx(0.125)
    assert literal.score == pytest.approx(8.0)
    assert literal.label == "false"
    assert normalized.score == pytest.approx(2 / 3)
    assert normalized.label == "false"
