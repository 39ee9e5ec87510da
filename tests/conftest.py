import os

# Qtウィジェットのテストをディスプレイのない環境でも実行できるようにする
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
