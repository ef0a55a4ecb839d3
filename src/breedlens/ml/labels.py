"""Localized display names for ImageNet dog-breed labels.

``localize`` is pure and total: labels missing from the table come back
unchanged.
"""

from __future__ import annotations

# Keys are normalized with ``_normalize``.
BREED_NAMES: dict[str, str] = {
    "chihuahua": "吉娃娃",
    "japanese_spaniel": "日本狆",
    "maltese_dog": "瑪爾濟斯犬",
    "pekinese": "北京犬",
    "shih_tzu": "西施犬",
    "blenheim_spaniel": "布倫海姆獵犬",
    "papillon": "蝴蝶犬",
    "toy_terrier": "玩具㹴",
    "rhodesian_ridgeback": "羅得西亞脊背犬",
    "afghan_hound": "阿富汗獵犬",
    "basset": "巴吉度獵犬",
    "beagle": "米格魯",
    "bloodhound": "尋血獵犬",
    "bluetick": "藍斑獵浣熊犬",
    "black_and_tan_coonhound": "黑褐獵浣熊犬",
    "walker_hound": "沃克獵犬",
    "english_foxhound": "英國獵狐犬",
    "redbone": "紅骨獵浣熊犬",
    "borzoi": "蘇俄獵狼犬",
    "irish_wolfhound": "愛爾蘭獵狼犬",
    "italian_greyhound": "義大利灰獵犬",
    "whippet": "惠比特犬",
    "ibizan_hound": "伊比莎獵犬",
    "norwegian_elkhound": "挪威獵麋犬",
    "otterhound": "獵水獺犬",
    "saluki": "薩路基獵犬",
    "scottish_deerhound": "蘇格蘭獵鹿犬",
    "weimaraner": "威瑪獵犬",
    "staffordshire_bullterrier": "斯塔福郡鬥牛㹴",
    "american_staffordshire_terrier": "美國斯塔福郡㹴",
    "bedlington_terrier": "貝林登㹴",
    "border_terrier": "邊境㹴",
    "kerry_blue_terrier": "凱利藍㹴",
    "irish_terrier": "愛爾蘭㹴",
    "norfolk_terrier": "諾福克㹴",
    "norwich_terrier": "諾威奇㹴",
    "yorkshire_terrier": "約克夏㹴",
    "wire_haired_fox_terrier": "剛毛獵狐㹴",
    "lakeland_terrier": "湖畔㹴",
    "sealyham_terrier": "西里漢㹴",
    "airedale": "萬能㹴",
    "cairn": "凱恩㹴",
    "australian_terrier": "澳洲㹴",
    "dandie_dinmont": "丹第丁蒙㹴",
    "boston_bull": "波士頓㹴",
    "miniature_schnauzer": "迷你雪納瑞",
    "giant_schnauzer": "巨型雪納瑞",
    "standard_schnauzer": "標準雪納瑞",
    "scotch_terrier": "蘇格蘭㹴",
    "tibetan_terrier": "西藏㹴",
    "silky_terrier": "絲毛㹴",
    "soft_coated_wheaten_terrier": "愛爾蘭軟毛㹴",
    "west_highland_white_terrier": "西高地白㹴",
    "lhasa": "拉薩犬",
    "flat_coated_retriever": "平毛尋回犬",
    "curly_coated_retriever": "捲毛尋回犬",
    "golden_retriever": "金毛獵犬",
    "labrador_retriever": "拉布拉多犬",
    "chesapeake_bay_retriever": "乞沙比克獵犬",
    "german_short_haired_pointer": "德國短毛指示犬",
    "vizsla": "維茲拉犬",
    "english_setter": "英國蹲獵犬",
    "irish_setter": "愛爾蘭紅蹲獵犬",
    "gordon_setter": "戈登蹲獵犬",
    "brittany_spaniel": "布列塔尼獵犬",
    "clumber": "克倫伯獵犬",
    "english_springer": "英國史賓格犬",
    "welsh_springer_spaniel": "威爾斯史賓格犬",
    "cocker_spaniel": "可卡犬",
    "sussex_spaniel": "蘇塞克斯獵犬",
    "irish_water_spaniel": "愛爾蘭水獵犬",
    "kuvasz": "庫瓦茲犬",
    "schipperke": "史奇派克犬",
    "groenendael": "格羅安達犬",
    "malinois": "馬利諾斯犬",
    "briard": "伯瑞犬",
    "kelpie": "澳洲卡爾比犬",
    "komondor": "可蒙犬",
    "old_english_sheepdog": "古代英國牧羊犬",
    "shetland_sheepdog": "喜樂蒂牧羊犬",
    "collie": "柯利牧羊犬",
    "border_collie": "邊境牧羊犬",
    "bouvier_des_flandres": "法蘭德斯畜牧犬",
    "rottweiler": "羅威納犬",
    "german_shepherd": "德國牧羊犬",
    "doberman": "杜賓犬",
    "miniature_pinscher": "迷你杜賓犬",
    "greater_swiss_mountain_dog": "大瑞士山地犬",
    "bernese_mountain_dog": "伯恩山犬",
    "appenzeller": "阿彭策爾山地犬",
    "entlebucher": "恩特雷布赫山地犬",
    "boxer": "拳師犬",
    "bull_mastiff": "鬥牛獒",
    "tibetan_mastiff": "藏獒",
    "french_bulldog": "法國鬥牛犬",
    "great_dane": "大丹犬",
    "saint_bernard": "聖伯納犬",
    "eskimo_dog": "愛斯基摩犬",
    "malamute": "阿拉斯加雪橇犬",
    "siberian_husky": "西伯利亞哈士奇",
    "dalmatian": "大麥町",
    "affenpinscher": "猴㹴",
    "basenji": "巴仙吉犬",
    "pug": "巴哥犬",
    "leonberg": "蘭伯格犬",
    "newfoundland": "紐芬蘭犬",
    "great_pyrenees": "大白熊犬",
    "samoyed": "薩摩耶犬",
    "pomeranian": "博美犬",
    "chow": "鬆獅犬",
    "keeshond": "荷蘭毛獅犬",
    "brabancon_griffon": "布魯塞爾格林芬犬",
    "pembroke": "潘布魯克威爾斯柯基犬",
    "cardigan": "卡提根威爾斯柯基犬",
    "toy_poodle": "玩具貴賓犬",
    "miniature_poodle": "迷你貴賓犬",
    "standard_poodle": "標準貴賓犬",
    "mexican_hairless": "墨西哥無毛犬",
}


def _normalize(label: str) -> str:
    return label.strip().lower().replace("-", "_").replace(" ", "_")


def localize(raw_label: str) -> str:
    """Map a raw model label to its display name.

    ImageNet labels often list synonyms ("Maltese dog, Maltese terrier,
    Maltese"); the full label is tried first, then each synonym in order.
    """
    candidates = [raw_label, *raw_label.split(",")]
    for candidate in candidates:
        name = BREED_NAMES.get(_normalize(candidate))
        if name is not None:
            return name
    return raw_label
