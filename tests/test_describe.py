from .helpers import hand


def test_describes_every_hand_type():
    cases = [
        ("FIVE_CARD_DRAW", "As Kd Jh 9c 4d", "Ace high"),
        ("FIVE_CARD_DRAW", "Kh Ks Qh 8d 4c", "Pair of Kings"),
        ("FIVE_CARD_DRAW", "Kh Ks 7h 7d 4c", "Two pair, Kings and Sevens"),
        ("FIVE_CARD_DRAW", "9h 9d 9s Qd Js", "Three of a kind, Nines"),
        ("FIVE_CARD_DRAW", "9h 8d 7c 6s Th", "Straight to the Ten"),
        ("FIVE_CARD_DRAW", "Ah 2d 3c 4s 5h", "Straight to the Five"),
        ("FIVE_CARD_DRAW", "Ah Jh 9h 6h 2h", "Ace high flush"),
        ("FIVE_CARD_DRAW", "Ac Ad As Kh Ks", "Full house, Aces full of Kings"),
        ("FIVE_CARD_DRAW", "Jc Jd Js Jh 2s", "Four of a kind, Jacks"),
        ("FIVE_CARD_DRAW", "5h 6h 7h 8h 9h", "Straight flush to the Nine"),
        ("FIVE_CARD_DRAW", "As Ks Qs Js Ts", "Royal flush"),
        ("TWOS_JACKS_MAN_WITH_THE_AXE", "Ah Ad Ac 2s Jd", "Five of a kind, Aces"),
    ]
    for variant, labels, expected in cases:
        assert hand(variant, labels).description == expected, labels


def test_plural_names_for_sixes_and_deuces():
    assert hand("FIVE_CARD_DRAW", "6h 6s Qh 8d 4c").description == "Pair of Sixes"
    assert hand("FIVE_CARD_DRAW", "2h 2s 2d 8d 4c").description == "Three of a kind, Deuces"


def test_description_uses_resolved_wild_cards():
    assert hand("BASEBALL", "3h 3d Kc Kd 2s").description == "Four of a kind, Kings"
