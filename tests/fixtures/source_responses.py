# ABOUTME: Canned source API response fixtures for testing.
# ABOUTME: Realistic OpenBD, NDL, ISBNdb, Google Books, CiNii, and Kinokuniya payloads.

# ISBNs used throughout the tests (all checksum-valid).
JP_ISBN10 = "4003101014"
JP_ISBN13 = "9784003101018"
EN_ISBN10 = "0156001314"
EN_ISBN13 = "9780156001311"
ASIN = "B00ABCDEFG"

OPENBD_KOKORO = {
    "onix": {
        "RecordReference": JP_ISBN13,
        "CollateralDetail": {
            "TextContent": [
                {"TextType": "02", "ContentAudience": "00", "Text": "先生の遺書。"},
                {
                    "TextType": "03",
                    "ContentAudience": "00",
                    "Text": "親友を裏切って恋人を得た先生の、罪の意識と孤独を描く。",
                },
            ]
        },
    },
    "summary": {
        "isbn": JP_ISBN13,
        "title": "こころ",
        "volume": "",
        "series": "岩波文庫",
        "publisher": "岩波書店",
        "pubdate": "1989-04",
        "cover": "",
        "author": "夏目漱石／著",
    },
}

OPENBD_NO_ONIX_TEXT = {
    "onix": {"CollateralDetail": {}},
    "summary": {
        "isbn": EN_ISBN13,
        "title": "The Name of the Rose",
        "volume": "",
        "series": "",
        "publisher": "Harcourt",
        "pubdate": "1994",
        "cover": "",
        "author": "Umberto Eco",
    },
}

NDL_KOKORO_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss xmlns:dc="http://purl.org/dc/elements/1.1/"
     xmlns:dcndl="http://ndl.go.jp/dcndl/terms/"
     xmlns:dcterms="http://purl.org/dc/terms/"
     version="2.0">
  <channel>
    <title>こころ - 国立国会図書館サーチ OpenSearch</title>
    <item>
      <title>こころ</title>
      <dcndl:volume>上</dcndl:volume>
      <dcndl:seriesTitle>岩波文庫</dcndl:seriesTitle>
      <author>夏目漱石 著</author>
      <dc:publisher>岩波書店</dc:publisher>
      <pubDate>Sat, 01 Apr 1989 00:00:00 +0900</pubDate>
    </item>
    <item>
      <title>こころ (別版)</title>
    </item>
  </channel>
</rss>
""".encode("utf-8")

NDL_EMPTY_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss xmlns:dc="http://purl.org/dc/elements/1.1/" version="2.0">
  <channel>
    <title>OpenSearch</title>
    <openSearch:totalResults xmlns:openSearch="http://a9.com/-/spec/opensearchrss/1.0/">0</openSearch:totalResults>
  </channel>
</rss>
"""

ISBNDB_ROSE = {
    "book": {
        "title": "The Name of the Rose",
        "title_long": "The Name of the Rose: including the Author's Postscript",
        "authors": ["Eco, Umberto", "Weaver, William"],
        "publisher": "Harcourt",
        "date_published": "1994",
        "synopsis": "A murder mystery set in a fourteenth-century abbey.",
        "isbn13": EN_ISBN13,
    }
}

ISBNDB_NOT_FOUND = {"errorMessage": "Not Found"}

GOOGLE_ROSE = {
    "kind": "books#volumes",
    "totalItems": 1,
    "items": [
        {
            "volumeInfo": {
                "title": "The Name of the Rose",
                "subtitle": "Including the Author's Postscript",
                "authors": ["Umberto Eco"],
                "publisher": "Houghton Mifflin Harcourt",
                "publishedDate": "1994",
                "description": "The year is 1327. Franciscans in a wealthy Italian abbey...",
            }
        }
    ],
}

GOOGLE_EMPTY = {"kind": "books#volumes", "totalItems": 0}

CINII_KOKORO = {
    "@context": {"dc": "http://purl.org/dc/elements/1.1/"},
    "@graph": [
        {
            "@type": "channel",
            "@id": "https://ci.nii.ac.jp/books/opensearch/search?isbn=4003101014",
            "opensearch:totalResults": "1",
            "items": [
                {
                    "@type": "item",
                    "@id": "https://ci.nii.ac.jp/ncid/BN03116738",
                    "dc:title": "こころ",
                    "dc:creator": "夏目漱石著",
                    "dc:publisher": ["岩波書店"],
                    "dc:pubDate": "1989",
                    "dc:isbn": JP_ISBN10,
                }
            ],
        }
    ],
}

CINII_EMPTY = {
    "@context": {"dc": "http://purl.org/dc/elements/1.1/"},
    "@graph": [
        {
            "@type": "channel",
            "@id": "https://ci.nii.ac.jp/books/opensearch/search?isbn=0156001314",
            "opensearch:totalResults": "0",
            "opensearch:startIndex": "0",
            "opensearch:itemsPerPage": "0",
        }
    ],
}

KINOKUNIYA_KOKORO_HTML = """<html>
<head><title>こころ / 夏目漱石 - 紀伊國屋書店ウェブストア</title></head>
<body>
  <div class="career_box">
    <h3>出版社内容情報</h3>
    <p>先生の遺書を通して、明治の精神を描く。</p>
  </div>
  <div class="career_box">
    <h3>内容説明</h3>
    <p>
      親友を裏切った先生の孤独。
    </p>
  </div>
  <div class="career_box">
    <h3>目次</h3>
    <p>上 先生と私</p>
    <p>中 両親と私</p>
  </div>
</body>
</html>
"""

KINOKUNIYA_NO_DESCRIPTION_HTML = """<html><body>
  <div class="career_box"><h3>著者紹介</h3><p>夏目漱石</p></div>
</body></html>
"""
