"""
Build Spec

CodeBuild で実行するイメージビルドスクリプト。
REPOSITORY_URI / CONTAINER_NAME はプロジェクトの環境変数で渡す。
"""
from typing import Any, Dict, Iterable, List, Optional

IMAGE_DEFINITIONS_FILE = 'imagedefinitions.json'


def build_image_spec(test_commands: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    """ECR ログイン → ビルド → コミットハッシュでタグ付け → プッシュ → マニフェスト出力"""
    build_commands: List[str] = list(test_commands or [])
    build_commands += [
        'docker build -t $REPOSITORY_URI:latest .',
        'docker tag $REPOSITORY_URI:latest $REPOSITORY_URI:$IMAGE_TAG',
    ]

    return {
        'version': '0.2',
        'phases': {
            'pre_build': {
                'commands': [
                    'REGISTRY=$(echo $REPOSITORY_URI | cut -d/ -f1)',
                    'aws ecr get-login-password --region $AWS_DEFAULT_REGION'
                    ' | docker login --username AWS --password-stdin $REGISTRY',
                    'COMMIT_HASH=$(echo $CODEBUILD_RESOLVED_SOURCE_VERSION | cut -c 1-7)',
                    'IMAGE_TAG=${COMMIT_HASH:=latest}',
                ],
            },
            'build': {
                'commands': build_commands,
            },
            'post_build': {
                'commands': [
                    'docker push $REPOSITORY_URI:latest',
                    'docker push $REPOSITORY_URI:$IMAGE_TAG',
                    'printf \'[{"name":"%s","imageUri":"%s"}]\''
                    f' $CONTAINER_NAME $REPOSITORY_URI:$IMAGE_TAG > {IMAGE_DEFINITIONS_FILE}',
                ],
            },
        },
        'artifacts': {
            'files': [IMAGE_DEFINITIONS_FILE],
        },
    }
