"""
どこで: `engine.core` サブパッケージ。
何を: フレーム駆動（FrameScheduler）・サーフェス寸法管理・描画ウィンドウを提供。
なぜ: 描画ループの基盤を構成し、上位層（UI/API）から再利用可能にするため。
"""
