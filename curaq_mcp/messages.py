"""User-facing text returned to the calling model."""

# Argument validation
QUERY_REQUIRED = "エラー: 検索キーワードを指定してください"
ARTICLE_ID_REQUIRED = "エラー: 記事IDを指定してください"
ID_AND_ACTION_REQUIRED = "エラー: 記事IDとアクションを指定してください"
INVALID_ACTION = "エラー: アクションは 'read' または 'delete' のいずれかを指定してください"
URL_REQUIRED = "エラー: URLを指定してください"
UNKNOWN_TOOL = "不明なツール: {name}"

# Backend errors
GENERIC_ERROR = "エラー ({status}): {detail}"
UNKNOWN_ERROR_DETAIL = "不明なエラー"
SAVE_FAILED_DETAIL = "記事の保存に失敗しました"
NOT_FOUND = "記事が見つかりませんでした（ID: {article_id}）"
FORBIDDEN = "この記事へのアクセス権限がありません。"
SEMANTIC_UNAVAILABLE = "セマンティック検索は現在利用できません。キーワード検索をお試しください。"
UNREAD_LIMIT = "エラー: 未読記事が30件に達しています。既存の記事を読むか削除してから保存してください。"
LIMIT_REACHED = "エラー: 今月の記事保存上限に達しました。"
ALREADY_READ = "この記事は既に読了済みです。"
INVALID_CONTENT = "エラー: このコンテンツは保存できません。"
UNEXPECTED = "エラーが発生しました: {error}"

# Listing and search
DETAIL_HINT = "詳細が必要な場合は get_article で記事IDを指定してください。"
NO_UNREAD = "未読記事がありません。"
UNREAD_HEADER = "未読記事一覧（{count}件）"
NO_SEMANTIC_MATCH = "「{query}」に関連する記事が見つかりませんでした。"
NO_KEYWORD_MATCH = "「{query}」に一致する記事が見つかりませんでした。"
SEARCH_HEADER = "{label}結果：「{query}」（{count}件）"
SEMANTIC_LABEL = "セマンティック検索"
KEYWORD_LABEL = "キーワード検索"

# Article detail
STATUS_LABELS = {"unread": "未読", "read": "既読", "deferred": "後回し"}
UNKNOWN_LABEL = "不明"

# Status updates
MARKED_READ = "記事を既読にマークしました（ID: {article_id}）"
DELETED = "記事を削除しました（ID: {article_id}）"

# Saving
RESTORED = "記事を再登録しました"
ALREADY_SAVED = "記事は既に保存されています"
SAVED = "記事を保存しました"
