from facemood.selector import EMOTION_THRESHOLD, EmotionSelector, select_emotion


def test_select_emotion_confident_change():
    r = select_emotion({"happy": 0.6, "neutral": 0.3}, "neutral")
    assert r.label == "happy" and r.changed is True
    assert r.emotion.label == "happy" and r.emotion.confirmed


def test_select_emotion_below_threshold_keeps_previous():
    r = select_emotion({"happy": 0.35, "sad": 0.3}, "neutral", 0.8)
    assert r.changed is False
    assert r.label == "happy"
    assert r.emotion.label == "neutral" and r.emotion.confidence == 0.8


def test_threshold_is_strict():
    assert EMOTION_THRESHOLD == 0.4
    assert select_emotion({"sad": 0.4}, "neutral").changed is False
    assert select_emotion({"sad": 0.4000001}, "neutral").changed is True


def test_low_confidence_never_changes_regardless_of_previous():
    for previous in (None, "neutral", "happy", "angry"):
        assert select_emotion({"fearful": 0.39, "angry": 0.2}, previous).changed is False


def test_empty_mapping_selects_neutral():
    r = select_emotion({}, "happy", 0.9)
    assert (r.label, r.confidence, r.changed) == ("neutral", 0.0, False)
    assert r.emotion.label == "happy"


def test_same_label_does_not_change():
    assert select_emotion({"happy": 0.95}, "happy").changed is False


def test_selector_fires_once_for_steady_input():
    sel = EmotionSelector()
    frames = [{"surprised": 0.7, "neutral": 0.2}] * 5
    changes = [sel.update(f).changed for f in frames]
    assert changes == [True, False, False, False, False]
    assert sel.state.label == "surprised"


def test_selector_ignores_flicker_and_confirms_new_label():
    sel = EmotionSelector()
    sel.update({"happy": 0.8})
    # low-confidence flicker does not overwrite the confirmed emotion
    assert sel.update({"sad": 0.3, "happy": 0.1}).changed is False
    assert sel.state.label == "happy" and sel.state.confidence == 0.8
    assert sel.update({"sad": 0.7}).changed is True
    assert sel.state.label == "sad"
